"""Unit tests for ErrorCode.get_error() static method."""
from parafort.error_codes import ErrorCode


class TestErrorCodeGetError:

    # ── String code lookup ───────────────────────────────────────────────

    def test_get_error_by_valid_code(self):
        result = ErrorCode.get_error("ERR_1001")
        assert result == ErrorCode.ERR_1001
        assert result["code"] == "ERR_1001"

    def test_get_error_by_invalid_code_returns_default(self):
        """Should fall back to ERR_9001 for an unrecognised code string."""
        assert ErrorCode.get_error("ERR_INVALID") == ErrorCode.ERR_9001

    # ── Exception analysis ───────────────────────────────────────────────

    def test_missing_field(self):
        assert ErrorCode.get_error(Exception("dueDate is required")) == ErrorCode.ERR_1001

    def test_invalid_status(self):
        assert ErrorCode.get_error(Exception("Invalid status 'archived'")) == ErrorCode.ERR_1003

    def test_llm_timeout(self):
        assert ErrorCode.get_error(Exception("OpenAI request timeout")) == ErrorCode.ERR_2001

    def test_rate_limited(self):
        assert ErrorCode.get_error(Exception("Rate limit reached for gpt-4o")) == ErrorCode.ERR_2002

    def test_bad_api_key(self):
        assert ErrorCode.get_error(Exception("Incorrect API key provided")) == ErrorCode.ERR_2004

    def test_unique_violation(self):
        err = Exception("UNIQUE constraint failed: service_orders.order_id")
        assert ErrorCode.get_error(err) == ErrorCode.ERR_3004

    def test_connection_lost(self):
        assert ErrorCode.get_error(Exception("server closed the connection unexpectedly")) == ErrorCode.ERR_3003

    def test_generic_timeout(self):
        assert ErrorCode.get_error(Exception("operation timed out")) == ErrorCode.ERR_9002

    def test_unknown_error(self):
        assert ErrorCode.get_error(ValueError("boom")) == ErrorCode.ERR_9001

    def test_every_entry_has_both_messages(self):
        entries = [v for k, v in vars(ErrorCode).items() if k.startswith("ERR_")]
        assert entries
        for entry in entries:
            assert {"code", "admin_msg", "user_msg"} <= set(entry)
