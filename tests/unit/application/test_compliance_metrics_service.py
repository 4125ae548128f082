"""Tests for ComplianceMetricsService."""
from datetime import timedelta
from types import SimpleNamespace

import pytest

from parafort.application.compliance_metrics_service import (
    CATEGORY_COLORS, ComplianceMetricsService, parse_business_filter,
)
from parafort.domain.exceptions import UnauthorizedError, ValidationError


class TestParseBusinessFilter:

    @pytest.mark.parametrize("value", [None, '', 'all'])
    def test_all_businesses(self, value):
        assert parse_business_filter(value) is None

    def test_numeric_id(self):
        assert parse_business_filter('12') == 12

    def test_garbage(self):
        with pytest.raises(ValidationError):
            parse_business_filter('acme')


class TestComplianceMetricsService:

    @pytest.fixture
    def env(self, uow, db_session, now, user_factory, business_factory, event_factory):
        owner = user_factory.create(db_session)
        acme = business_factory.create(db_session, user=owner, name='Acme LLC')
        beta = business_factory.create(db_session, user=owner, name='Beta Corp', entity_type='Corporation')

        event_factory.create(db_session, business=acme, status='completed', category='tax',
                             created_at=now - timedelta(days=10), completed_date=now - timedelta(days=4),
                             due_date=now - timedelta(days=2))
        event_factory.create(db_session, business=acme, status='completed', category='state_filing',
                             created_at=now - timedelta(days=5), completed_date=now - timedelta(days=1),
                             due_date=now - timedelta(days=3))
        event_factory.create(db_session, business=acme, status='overdue', category='tax',
                             created_at=now - timedelta(days=8), due_date=now - timedelta(days=6),
                             priority='urgent')
        event_factory.create(db_session, business=beta, status='pending', category='licensing',
                             created_at=now - timedelta(days=3), due_date=now + timedelta(days=10),
                             priority='urgent')

        return {
            'service': ComplianceMetricsService(uow),
            'owner_id': owner.id,
            'acme_id': acme.id,
            'beta_id': beta.id,
        }

    # ── Metrics ──────────────────────────────────────────────────────────

    def test_overall_metrics(self, env, now):
        result = env['service'].get_metrics(env['owner_id'], 'all', '30d', now=now)
        overall = result['overall']

        assert overall['totalItems'] == 4
        assert overall['completedItems'] == 2
        assert overall['overdueItems'] == 1
        assert overall['upcomingItems'] == 1
        assert overall['inProgressItems'] == 0
        assert overall['completionRate'] == 50
        assert overall['onTimeRate'] == 50
        assert overall['avgCompletionTime'] == pytest.approx(5.0, abs=0.01)

    def test_business_breakdown(self, env, now):
        result = env['service'].get_metrics(env['owner_id'], None, '30d', now=now)
        by_id = {b['businessId']: b for b in result['businesses']}

        acme = by_id[env['acme_id']]
        assert acme['businessName'] == 'Acme LLC'
        assert acme['overallScore'] == 67
        assert acme['metrics']['completionRate'] == pytest.approx(66.666, abs=0.01)
        assert acme['riskLevel'] == 'high'
        assert acme['lastUpdated'] == now.isoformat()

        beta = by_id[env['beta_id']]
        assert beta['overallScore'] == 0
        assert beta['riskLevel'] == 'critical'

    def test_single_business_filter(self, env, now):
        result = env['service'].get_metrics(env['owner_id'], str(env['beta_id']), '30d', now=now)
        assert result['overall']['totalItems'] == 1
        assert [b['businessId'] for b in result['businesses']] == [env['beta_id']]

    def test_other_user_sees_nothing(self, env, now, user_factory, db_session):
        stranger_id = user_factory.create(db_session).id
        result = env['service'].get_metrics(stranger_id, None, '30d', now=now)
        assert result['overall']['totalItems'] == 0
        assert result['overall']['completionRate'] == 0
        assert result['businesses'] == []

    def test_unknown_time_range_uses_thirty_days(self, env, now):
        assert env['service'].get_metrics(env['owner_id'], None, 'forever', now=now) == \
            env['service'].get_metrics(env['owner_id'], None, '30d', now=now)

    # ── Trends ───────────────────────────────────────────────────────────

    def test_trends_fill_every_day(self, env, now):
        trends = env['service'].get_trends(env['owner_id'], None, '30d', now=now)['trends']
        assert len(trends) == 31
        assert trends[-1]['date'] == now.date().isoformat()

        by_date = {t['date']: t for t in trends}
        completed_day = by_date[(now - timedelta(days=1)).date().isoformat()]
        assert completed_day['resolvedIssues'] == 1
        assert completed_day['completionRate'] == 100

        overdue_day = by_date[(now - timedelta(days=6)).date().isoformat()]
        assert overdue_day['overdueCount'] == 1
        assert overdue_day['completionRate'] == 0

        assert sum(t['newRequirements'] for t in trends) == 4

    def test_trends_by_month_for_one_year(self, env, now):
        trends = env['service'].get_trends(env['owner_id'], None, '1y', now=now)['trends']
        assert len(trends) == 13
        assert trends[-1]['date'] == '2026-06-01'
        assert trends[-1]['resolvedIssues'] == 2

    # ── Categories ───────────────────────────────────────────────────────

    def test_categories(self, env):
        categories = env['service'].get_categories(env['owner_id'])['categories']
        assert [c['category'] for c in categories] == ['licensing', 'state_filing', 'tax']

        tax = categories[2]
        assert (tax['total'], tax['completed']) == (2, 1)
        assert tax['percentage'] == 50
        assert [c['color'] for c in categories] == CATEGORY_COLORS[:3]

    # ── Urgent events ────────────────────────────────────────────────────

    def test_urgent_events_require_admin(self, env, now):
        with pytest.raises(UnauthorizedError):
            env['service'].get_urgent_events(SimpleNamespace(is_admin=False), now=now)

    def test_urgent_events_for_admin(self, env, now):
        events = env['service'].get_urgent_events(SimpleNamespace(is_admin=True), now=now)
        assert [e['businessName'] for e in events] == ['Acme LLC', 'Beta Corp']
        assert events[0]['daysRemaining'] == -6
        assert events[1]['daysRemaining'] == 10
