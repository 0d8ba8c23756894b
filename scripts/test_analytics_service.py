import unittest
from datetime import datetime, timedelta

from analytics_fakes import NOW, FakeAgent, InMemoryPropertyStore, make_property
from app.models.agent import AgentAnalytics, InteractionEvent, new_agent_analytics
from app.services.analytics_dashboard_service import get_dashboard_summary
from app.services.analytics_service import build_report, daily_analytics
from app.utils.clock import FixedClock
from app.utils.errors import DependencyError


def event(interaction_type, timestamp, ip="1.1.1.1"):
    return InteractionEvent(type=interaction_type, timestamp=timestamp, ip=ip)


class TestDailyAnalytics(unittest.TestCase):

    def test_only_days_with_events_are_listed(self):
        day_one = NOW - timedelta(days=2)
        day_two = NOW - timedelta(days=5)
        events = [
            event("view", day_one.replace(hour=11)),
            event("view", day_one.replace(hour=10)),
            # stored documents come back naive, in UTC
            event("view", day_one.replace(hour=9, tzinfo=None)),
            event("whatsapp", day_two.replace(hour=8)),
            event("email", NOW - timedelta(days=40)),
        ]

        self.assertEqual(daily_analytics(events, NOW), [
            {"date": "2026-10-14", "views": 0, "whatsapp": 1, "email": 0, "phone": 0},
            {"date": "2026-10-17", "views": 3, "whatsapp": 0, "email": 0, "phone": 0},
        ])

    def test_groups_by_utc_date(self):
        events = [
            event("phone", datetime(2026, 10, 18, 23, 59, 59)),
            event("phone", datetime(2026, 10, 19, 0, 0, 1)),
        ]
        dates = [row["date"] for row in daily_analytics(events, NOW)]
        self.assertEqual(dates, ["2026-10-18", "2026-10-19"])

    def test_empty_history(self):
        self.assertEqual(daily_analytics([], NOW), [])
        self.assertEqual(daily_analytics([event("view", NOW - timedelta(days=31))], NOW), [])


class TestBuildReport(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.clock = FixedClock(NOW)

    async def test_report_for_agent_without_analytics(self):
        agent = FakeAgent()
        report = await build_report(agent, property_store=InMemoryPropertyStore(), clock=self.clock)

        self.assertEqual(report["summary"], {
            "profileViews": {"total": 0, "unique": 0},
            "interactions": {
                "whatsapp": {"total": 0, "unique": 0},
                "email": {"total": 0, "unique": 0},
                "phone": {"total": 0, "unique": 0},
            },
            "totalInteractions": {"total": 0, "unique": 0},
            "totalProperties": 0,
            "totalPropertyInquiries": 0,
        })
        self.assertEqual(report["propertyAnalytics"], [])
        self.assertEqual(report["recentInteractions"], [])
        self.assertEqual(report["dailyAnalytics"], [])
        self.assertEqual(report["propertiesByStatus"], {})
        # reading does not create analytics on the agent
        self.assertIsNone(agent.analytics)

    async def test_property_rollups(self):
        agent = FakeAgent()
        other = FakeAgent(email="other@example.com")
        store = InMemoryPropertyStore([
            make_property(agent, title="Villa", inquiries={"whatsapp": 3, "email": 1, "calls": 2}),
            make_property(agent, title="Loft", status="For Rent", inquiries=None, images=[]),
            make_property(agent, title="Cottage", inquiries={"whatsapp": 1}),
            make_property(other, title="Not mine", inquiries={"whatsapp": 9}),
        ])

        report = await build_report(agent, property_store=store, clock=self.clock)

        by_title = {p["title"]: p for p in report["propertyAnalytics"]}
        self.assertEqual(set(by_title), {"Villa", "Loft", "Cottage"})
        self.assertEqual(by_title["Villa"]["inquiries"], {"total": 6, "whatsapp": 3, "email": 1, "calls": 2})
        self.assertEqual(by_title["Loft"]["inquiries"], {"total": 0, "whatsapp": 0, "email": 0, "calls": 0})
        self.assertEqual(by_title["Villa"]["thumbnail"], "https://cdn.example.com/Villa.jpg")
        self.assertIsNone(by_title["Loft"]["thumbnail"])
        self.assertEqual(report["summary"]["totalProperties"], 3)
        self.assertEqual(report["summary"]["totalPropertyInquiries"], 7)
        self.assertEqual(report["propertiesByStatus"], {"For Sale": 2, "For Rent": 1})

    async def test_recent_feed_is_first_ten_events(self):
        analytics = new_agent_analytics()
        analytics.last_interactions = [
            event("view", NOW - timedelta(minutes=i), ip=f"10.0.0.{i}") for i in range(15)
        ]
        agent = FakeAgent(analytics=analytics)

        report = await build_report(agent, property_store=InMemoryPropertyStore(), clock=self.clock)

        feed = report["recentInteractions"]
        self.assertEqual(len(feed), 10)
        self.assertEqual(feed[0]["ip"], "10.0.0.0")
        self.assertEqual(feed[0]["timestamp"], "2026-10-19T12:00:00.000Z")
        self.assertEqual(feed[0]["_id"], str(analytics.last_interactions[0].id))
        self.assertEqual(set(feed[0]), {"_id", "type", "timestamp", "ip", "propertyId"})
        # the daily series uses the whole history, not just the feed
        self.assertEqual(report["dailyAnalytics"], [
            {"date": "2026-10-19", "views": 15, "whatsapp": 0, "email": 0, "phone": 0}
        ])

    async def test_property_fetch_failure_fails_the_report(self):
        agent = FakeAgent(analytics=new_agent_analytics())
        store = InMemoryPropertyStore(error=DependencyError("Failed to load properties"))

        with self.assertRaises(DependencyError):
            await build_report(agent, property_store=store, clock=self.clock)

    async def test_explicit_state_overrides_stored_one(self):
        stored = new_agent_analytics()
        fresh = AgentAnalytics(profileViews={"total": 4, "unique": 2})
        agent = FakeAgent(analytics=stored)

        report = await build_report(agent, analytics=fresh, property_store=InMemoryPropertyStore(), clock=self.clock)
        self.assertEqual(report["summary"]["profileViews"], {"total": 4, "unique": 2})


class TestDashboardSummary(unittest.IsolatedAsyncioTestCase):

    async def test_summary_combines_listing_and_profile_inquiries(self):
        analytics = AgentAnalytics(
            profileViews={"total": 20, "unique": 12},
            interactions={
                "whatsapp": {"total": 2, "unique": 1},
                "email": {"total": 1, "unique": 1},
                "phone": {"total": 0, "unique": 0},
            }
        )
        agent = FakeAgent(analytics=analytics)
        store = InMemoryPropertyStore([
            make_property(agent, title="Villa", property_type="villa", views=40,
                          inquiries={"whatsapp": 3, "email": 1, "calls": 2}),
            make_property(agent, title="Loft", status="For Rent", views=7, inquiries={"calls": 1}),
            make_property(agent, title="Plot", property_type="land"),
        ])

        summary = await get_dashboard_summary(agent, property_store=store)

        self.assertEqual(summary["totalProperties"], 3)
        self.assertEqual(summary["totalViews"], 20)
        self.assertEqual(summary["inquiries"], {"whatsapp": 5, "email": 2, "calls": 3})
        self.assertEqual(summary["totalInquiries"], 10)
        self.assertEqual(summary["conversionRate"], 50.0)
        self.assertEqual(summary["propertiesByStatus"], {"For Sale": 2, "For Rent": 1})
        self.assertEqual(summary["propertiesByType"], {"villa": 1, "apartment": 1, "land": 1})
        self.assertEqual(
            [p["title"] for p in summary["topPerformingProperties"]],
            ["Villa", "Loft", "Plot"]
        )
        self.assertEqual(summary["topPerformingProperties"][0], {"title": "Villa", "totalInquiries": 6, "views": 40})

    async def test_no_views_means_zero_conversion(self):
        summary = await get_dashboard_summary(FakeAgent(), property_store=InMemoryPropertyStore())
        self.assertEqual(summary["conversionRate"], 0.0)
        self.assertIsInstance(summary["conversionRate"], float)
        self.assertEqual(summary["topPerformingProperties"], [])


if __name__ == "__main__":
    unittest.main()
