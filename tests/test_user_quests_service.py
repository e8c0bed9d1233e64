import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from app.core.errors import (
    InvalidStatusError,
    QuestNotFoundError,
    ReservedStatusError,
    UserQuestExistsError,
    UserQuestNotFoundError,
)
from app.schemas.user_quest_schema import to_epoch_ms
from app.services import user_quests as service
from tests.base import DbTestCase


class GetAllTests(DbTestCase):
    def test_returns_all_user_quests(self):
        user = self.insert_user()
        q1 = self.insert_quest(user, title="Test Quest 1")
        q2 = self.insert_quest(user, title="Test Quest 2")
        self.insert_user_quest(user, q1, status="inProgress")
        self.insert_user_quest(user, q2, status="complete")

        quests = service.get_all(self.db, user)
        self.assertEqual(len(quests), 2)
        self.assertEqual({q.title for q in quests}, {"Test Quest 1", "Test Quest 2"})

    def test_skips_deleted_quests(self):
        user = self.insert_user()
        quest = self.insert_quest(user, title="Deleted Quest", deleted=True)
        self.insert_user_quest(user, quest, status="inProgress")

        self.assertEqual(service.get_all(self.db, user), [])
        self.assertEqual(service.count(self.db, user), 0)

    def test_only_returns_callers_quests(self):
        user = self.insert_user()
        other = self.insert_user(email="other@example.com")
        quest = self.insert_quest(user)
        self.insert_user_quest(other, quest)

        self.assertEqual(service.get_all(self.db, user), [])
        self.assertEqual(len(service.get_all(self.db, other)), 1)


class CountTests(DbTestCase):
    def test_counts_live_quests(self):
        user = self.insert_user()
        self.insert_user_quest(user, self.insert_quest(user))
        self.insert_user_quest(user, self.insert_quest(user, deleted=True))

        self.assertEqual(service.count(self.db, user), 1)


class CreateTests(DbTestCase):
    def test_creates_with_default_status(self):
        user = self.insert_user()
        quest = self.insert_quest(user, category="core", jurisdiction="MA")

        created = service.create(self.db, user, quest.id)

        self.assertEqual(created.quest_id, quest.id)
        self.assertEqual(created.status, "notStarted")
        self.assertIsNone(created.completion_time)
        self.assertEqual(service.get_status(self.db, user, quest.id), "notStarted")

    def test_rejects_duplicate(self):
        user = self.insert_user()
        quest = self.insert_quest(user)
        service.create(self.db, user, quest.id)

        with self.assertRaises(UserQuestExistsError):
            service.create(self.db, user, quest.id)
        self.assertEqual(service.count(self.db, user), 1)

    def test_unique_constraint_catches_concurrent_create(self):
        user = self.insert_user()
        quest = self.insert_quest(user)
        service.create(self.db, user, quest.id)

        real_execute = self.db.execute
        skipped = []

        def execute(statement, *args, **kwargs):
            # Pretend the duplicate check ran before the other request committed
            if not skipped and "user_quests" in str(statement):
                skipped.append(statement)
                result = MagicMock()
                result.scalar_one_or_none.return_value = None
                return result
            return real_execute(statement, *args, **kwargs)

        with patch.object(self.db, "execute", side_effect=execute):
            with self.assertRaises(UserQuestExistsError):
                service.create(self.db, user, quest.id)

        self.assertEqual(len(skipped), 1)
        self.assertEqual(service.count(self.db, user), 1)
        self.assertEqual(service.get_status(self.db, user, quest.id), "notStarted")

    def test_rejects_missing_or_deleted_quest(self):
        user = self.insert_user()
        deleted = self.insert_quest(user, deleted=True)

        with self.assertRaises(QuestNotFoundError):
            service.create(self.db, user, 9999)
        with self.assertRaises(QuestNotFoundError):
            service.create(self.db, user, deleted.id)


class SetStatusTests(DbTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.insert_user()
        self.quest = self.insert_quest(self.user)
        service.create(self.db, self.user, self.quest.id)

    def test_updates_status(self):
        service.set_status(self.db, self.user, self.quest.id, "complete")
        self.assertEqual(service.get_status(self.db, self.user, self.quest.id), "complete")

    def test_invalid_status(self):
        for value in ("invalid", "", "Complete", "completed", "FILED"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidStatusError) as ctx:
                    service.set_status(self.db, self.user, self.quest.id, value)
                self.assertIn("Invalid status", str(ctx.exception))
        self.assertEqual(service.get_status(self.db, self.user, self.quest.id), "notStarted")

    def test_invalid_status_checked_before_quest_lookup(self):
        with self.assertRaises(InvalidStatusError):
            service.set_status(self.db, self.user, 9999, "invalid")

    def test_filed_reserved_for_core(self):
        housing = self.insert_quest(self.user, category="housing", jurisdiction="MA")
        core = self.insert_quest(self.user, category="core", jurisdiction="MA")
        service.create(self.db, self.user, housing.id)
        service.create(self.db, self.user, core.id)

        with self.assertRaises(ReservedStatusError) as ctx:
            service.set_status(self.db, self.user, housing.id, "filed")
        self.assertEqual(str(ctx.exception), "This status is reserved for core quests only.")
        self.assertEqual(service.get_status(self.db, self.user, housing.id), "notStarted")

        updated = service.set_status(self.db, self.user, core.id, "filed")
        self.assertEqual(updated.status, "filed")

    def test_completion_time_follows_complete(self):
        before = service.get_by_quest_id(self.db, self.user, self.quest.id)
        self.assertEqual(before.status, "notStarted")
        self.assertIsNone(before.completion_time)

        service.set_status(self.db, self.user, self.quest.id, "complete")
        done = service.get_by_quest_id(self.db, self.user, self.quest.id)
        self.assertEqual(done.status, "complete")
        self.assertIsNotNone(done.completion_time)

        service.set_status(self.db, self.user, self.quest.id, "notStarted")
        reopened = service.get_by_quest_id(self.db, self.user, self.quest.id)
        self.assertEqual(reopened.status, "notStarted")
        self.assertIsNone(reopened.completion_time)

    def test_reapplying_complete_keeps_completion_time(self):
        first = service.set_status(self.db, self.user, self.quest.id, "complete")
        again = service.set_status(self.db, self.user, self.quest.id, "complete")
        self.assertEqual(first.completion_time, again.completion_time)

    def test_active_is_stored_as_in_progress(self):
        updated = service.set_status(self.db, self.user, self.quest.id, "active")
        self.assertEqual(updated.status, "inProgress")

    def test_requires_existing_user_quest(self):
        other = self.insert_user(email="other@example.com")
        with self.assertRaises(UserQuestNotFoundError):
            service.set_status(self.db, other, self.quest.id, "complete")

    def test_rejects_deleted_quest(self):
        gone = self.insert_quest(self.user, deleted=True)
        self.insert_user_quest(self.user, gone)
        with self.assertRaises(QuestNotFoundError):
            service.set_status(self.db, self.user, gone.id, "complete")


class DeleteForeverTests(DbTestCase):
    def test_removes_row(self):
        user = self.insert_user()
        quest = self.insert_quest(user)
        service.create(self.db, user, quest.id)
        self.assertIsNotNone(service.get_by_quest_id(self.db, user, quest.id))

        service.delete_forever(self.db, user, quest.id)

        self.assertIsNone(service.get_by_quest_id(self.db, user, quest.id))
        # The pair can be started again after a hard delete
        self.assertEqual(service.create(self.db, user, quest.id).status, "notStarted")

    def test_missing_row(self):
        user = self.insert_user()
        with self.assertRaises(UserQuestNotFoundError):
            service.delete_forever(self.db, user, 42)


class GroupingTests(DbTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.insert_user()
        specs = [
            ("Core A", "core", "inProgress"),
            ("Core B", "core", "complete"),
            ("Housing", "housing", "inProgress"),
            ("Gone", "housing", "complete"),
        ]
        for title, category, status in specs:
            quest = self.insert_quest(self.user, title=title, category=category,
                                      deleted=title == "Gone")
            self.insert_user_quest(self.user, quest, status=status)

    def test_by_category(self):
        groups = service.get_by_category(self.db, self.user)
        self.assertEqual(set(groups), {"core", "housing"})
        self.assertEqual(len(groups["core"]), 2)
        self.assertEqual([q.title for q in groups["housing"]], ["Housing"])

    def test_by_status(self):
        groups = service.get_by_status(self.db, self.user)
        self.assertEqual(set(groups), {"inProgress", "complete"})
        self.assertEqual(len(groups["inProgress"]), 2)
        self.assertEqual([q.title for q in groups["complete"]], ["Core B"])

    def test_groups_partition_listing(self):
        everything = sorted(q.id for q in service.get_all(self.db, self.user))
        for groups in (service.get_by_category(self.db, self.user),
                       service.get_by_status(self.db, self.user)):
            grouped = sorted(q.id for items in groups.values() for q in items)
            self.assertEqual(grouped, everything)

    def test_empty_user_has_no_groups(self):
        other = self.insert_user(email="other@example.com")
        self.assertEqual(service.get_by_category(self.db, other), {})
        self.assertEqual(service.get_by_status(self.db, other), {})


class EpochMillisTests(unittest.TestCase):
    def test_none_passes_through(self):
        self.assertIsNone(to_epoch_ms(None))

    def test_naive_values_are_utc(self):
        naive = datetime(2024, 1, 2, 3, 4, 5, 678000)
        aware = naive.replace(tzinfo=timezone.utc)
        self.assertEqual(to_epoch_ms(naive), to_epoch_ms(aware))
        self.assertEqual(to_epoch_ms(aware), 1704164645678)

    def test_offsets_are_respected(self):
        boston = timezone(timedelta(hours=-5))
        local = datetime(2024, 1, 1, 22, 4, 5, 678000, tzinfo=boston)
        self.assertEqual(to_epoch_ms(local), 1704164645678)


if __name__ == "__main__":
    unittest.main()
