import pytest
import os
import sys
from datetime import datetime, timedelta, timezone

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.lead import ActivityKind, Lead, compute_score, record_activity
from models.kpi import KPI, KPICategory, KPIHistoryPoint, KPITarget, Trend, classify_trend, record_kpi_value
from prompts.analytics import describe_series_trend

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

class TestEngagementScore:
    """Test lead engagement scoring."""

    def setup_method(self):
        """Set up test fixtures."""
        self.lead = Lead(
            user_id="user-1",
            email="jane@bakery.com",
            first_name="Jane",
            last_name="Doe",
            company="Jane's Bakery",
        )
        self.lead.engagement.total_emails_sent = 10
        self.lead.engagement.emails_opened = 5
        self.lead.engagement.links_clicked = 2
        self.lead.engagement.last_email_opened_at = NOW - timedelta(days=3)

    def test_score_components(self):
        """Test open rate, click rate, recency and completeness add up."""
        score = compute_score(self.lead, NOW)

        # 20 + 12 + (20 - 3/7) + 6
        assert score == pytest.approx(57.571, abs=0.01)

    def test_no_emails_sent(self):
        """Test a lead without any email activity scores only on profile completeness."""
        lead = Lead(user_id="user-1", email="new@lead.com", phone="555-0100")

        assert compute_score(lead, NOW) == 2

    def test_empty_profile_scores_zero(self):
        """Test a bare lead scores zero."""
        assert compute_score(Lead(user_id="user-1", email="x@y.com"), NOW) == 0

    def test_recency_floors_at_zero(self):
        """Test an open older than twenty weeks contributes nothing."""
        self.lead.engagement.last_email_opened_at = NOW - timedelta(days=365)

        assert compute_score(self.lead, NOW) == pytest.approx(38.0)

    def test_score_clamped_to_100(self):
        """Test inflated counters never push the score above 100."""
        self.lead.engagement.emails_opened = 10
        self.lead.engagement.links_clicked = 50
        self.lead.engagement.last_email_opened_at = NOW

        assert compute_score(self.lead, NOW) == 100

    def test_more_opens_never_lower_score(self):
        """Test the score is non-decreasing in opens with sends fixed."""
        scores = []
        for opens in range(1, 11):
            self.lead.engagement.emails_opened = opens
            self.lead.engagement.links_clicked = 0
            scores.append(compute_score(self.lead, NOW))

        assert scores == sorted(scores)

    @pytest.mark.parametrize("sent,opened,clicked", [
        (0, 0, 0),
        (0, 3, 7),
        (1, 0, 5),
        (100, 100, 100),
        (3, 1000, 1000),
    ])
    def test_score_always_in_range(self, sent, opened, clicked):
        """Test degenerate counter combinations stay within [0, 100]."""
        self.lead.engagement.total_emails_sent = sent
        self.lead.engagement.emails_opened = opened
        self.lead.engagement.links_clicked = clicked

        assert 0 <= compute_score(self.lead, NOW) <= 100

    def test_naive_timestamps_are_utc(self):
        """Test naive datetimes are treated as UTC."""
        self.lead.engagement.last_email_opened_at = (NOW - timedelta(days=3)).replace(tzinfo=None)

        assert compute_score(self.lead, NOW) == pytest.approx(57.571, abs=0.01)

class TestRecordActivity:
    """Test activity recording on leads."""

    def setup_method(self):
        """Set up test fixtures."""
        self.lead = Lead(user_id="user-1", email="sam@shop.com", first_name="Sam")

    def test_email_counters(self):
        """Test email activities update the matching counters."""
        record_activity(self.lead, ActivityKind.EMAIL_SENT, "Welcome email", now=NOW)
        record_activity(self.lead, ActivityKind.EMAIL_SENT, "Follow-up", now=NOW)
        record_activity(self.lead, ActivityKind.EMAIL_OPENED, "Opened welcome", now=NOW)
        record_activity(self.lead, ActivityKind.LINK_CLICKED, "Clicked offer", now=NOW)

        engagement = self.lead.engagement
        assert engagement.total_emails_sent == 2
        assert engagement.emails_opened == 1
        assert engagement.links_clicked == 1
        assert engagement.last_email_opened_at == NOW
        assert engagement.last_link_clicked_at == NOW
        assert len(self.lead.activities) == 4

    def test_score_recomputed(self):
        """Test the stored score matches a fresh computation after each activity."""
        record_activity(self.lead, ActivityKind.EMAIL_SENT, "Welcome email", now=NOW)
        record_activity(self.lead, ActivityKind.EMAIL_OPENED, "Opened", now=NOW)

        # 40 open rate + 20 recency + 2 completeness
        assert self.lead.engagement.engagement_score == pytest.approx(62.0)
        assert self.lead.engagement.engagement_score == compute_score(self.lead, NOW)

    def test_other_kinds_leave_counters(self):
        """Test non-email activities only touch the log and last activity."""
        record_activity(self.lead, "call", "Intro call", {"duration": 15}, now=NOW)

        assert self.lead.engagement.total_emails_sent == 0
        assert self.lead.activities[0].kind == ActivityKind.CALL
        assert self.lead.activities[0].metadata == {"duration": 15}
        assert self.lead.lifecycle.last_activity == NOW

    def test_unknown_kind_rejected(self):
        """Test an unknown activity kind raises."""
        with pytest.raises(ValueError):
            record_activity(self.lead, "teleported", "??", now=NOW)

    def test_document_round_trip(self):
        """Test stored documents carry derived fields and load back."""
        record_activity(self.lead, ActivityKind.EMAIL_SENT, "Welcome email", now=NOW)

        doc = self.lead.to_document()
        assert doc["full_name"] == "Sam"
        assert doc["engagement_rate"] == 0.0

        loaded = Lead.from_document(doc)
        assert loaded.engagement.total_emails_sent == 1
        assert loaded.activities[0].kind == ActivityKind.EMAIL_SENT

class TestKPITrend:
    """Test KPI trend classification and value recording."""

    def _history(self, *values):
        return [KPIHistoryPoint(date=NOW, value=v) for v in values]

    def test_decreasing(self):
        """Test the last value below the first of the window is decreasing."""
        assert classify_trend(self._history(10, 12, 9)) == Trend.DECREASING

    def test_single_point_is_stable(self):
        """Test a single point has nothing to compare with."""
        assert classify_trend(self._history(10)) == Trend.STABLE
        assert classify_trend([]) == Trend.STABLE

    def test_only_last_three_points_count(self):
        """Test older points fall outside the comparison window."""
        assert classify_trend(self._history(100, 1, 2, 3)) == Trend.INCREASING
        assert classify_trend(self._history(1, 5, 3, 5)) == Trend.STABLE

    def test_record_kpi_value(self):
        """Test recording a value updates current value, history and trend."""
        kpi = KPI(user_id="user-1", name="Monthly revenue", category=KPICategory.FINANCIAL,
                  target=KPITarget(value=1000))

        record_kpi_value(kpi, 500, now=NOW)
        record_kpi_value(kpi, 900, note="Spring promo", now=NOW)

        assert kpi.current_value == 900
        assert len(kpi.history) == 2
        assert kpi.history[-1].note == "Spring promo"
        assert kpi.trend == Trend.INCREASING
        assert kpi.updated_at == NOW

    @pytest.mark.parametrize("current,status", [
        (1200, "achieved"),
        (1000, "achieved"),
        (850, "on-track"),
        (500, "behind"),
    ])
    def test_performance(self, current, status):
        """Test performance status against the target."""
        kpi = KPI(user_id="user-1", name="Revenue", category=KPICategory.FINANCIAL,
                  target=KPITarget(value=1000), current_value=current)

        assert kpi.performance["status"] == status
        assert kpi.performance["percentage"] == round(current / 10, 2)

    def test_performance_without_target(self):
        """Test performance is undefined without a target."""
        kpi = KPI(user_id="user-1", name="Revenue", category=KPICategory.FINANCIAL, current_value=10)

        assert kpi.performance is None

class TestSeriesTrend:
    """Test metric series trend descriptions used in analysis prompts."""

    def test_insufficient_data(self):
        assert describe_series_trend([]) == "insufficient data"
        assert describe_series_trend([{"value": 3}]) == "insufficient data"

    def test_thresholds(self):
        """Test the five percent band around the first value."""
        assert describe_series_trend([100, 106]) == "increasing"
        assert describe_series_trend([100, 94]) == "decreasing"
        assert describe_series_trend([100, 104]) == "stable"

    def test_zero_start(self):
        """Test a series starting at zero."""
        assert describe_series_trend([{"value": 0}, {"value": 5}]) == "increasing"
        assert describe_series_trend([{"value": 0}, {"value": 0}]) == "stable"

if __name__ == "__main__":
    # Run tests
    pytest.main([__file__, "-v"])
