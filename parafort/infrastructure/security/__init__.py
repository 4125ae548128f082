from .rate_limiter import limiter, init_limiter, login_limit, api_limit

__all__ = ['limiter', 'init_limiter', 'login_limit', 'api_limit']
