from datetime import datetime, timedelta, timezone

from models.member import Member
from models.subtask import Subtask
from models.task import Task
from utils.indexer import index_by_assignee, index_by_project, index_by_team
from utils.progress import HealthLevel, Stats
from utils.rollup import (
    best_teams, effectiveness_rating, lead_effectiveness, member_report, overview,
    project_summary, status_breakdown, team_leaderboard, team_summary,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
PAST = NOW - timedelta(days=3)


def test_member_report_union_and_projects():
    tasks = [
        Task(id="t1", title="Site", related_project="Website", assigned_to="lead", subtasks=[
            Subtask(id="s1", assigned_to="ana", status="completed", progress_percentage=100),
            Subtask(id="s2", assigned_to="ben", status="in_progress", progress_percentage=40),
        ]),
        Task(id="t2", title="Calls", assigned_to="ana", status="in_progress", progress_percentage=20,
             deadline=PAST),
        Task(id="t3", title="Deck", related_project="Website", assigned_to="ana",
             status="pending", progress_percentage=0),
    ]
    report = member_report("ana", index_by_assignee(tasks), now=NOW)

    assert report.stats == Stats(total=3, completed=1, in_progress=1, pending=1, blocked=0,
                                 overdue=1, percentage=40)
    assert list(report.by_project) == ["General", "Website"]
    assert report.by_project["Website"].total == 2
    assert report.by_project["Website"].percentage == 50
    assert report.by_project["General"].overdue == 1


def test_member_report_for_unknown_member_is_empty():
    report = member_report("nobody", {}, now=NOW)
    assert report.stats == Stats()
    assert report.by_project == {}


def test_empty_leaderboard():
    assert team_leaderboard({}, []) == []


def test_leaderboard_ordering():
    members = [Member(id="b", name="Bob"), Member(id="a", name="Alice"),
               Member(id="c", name="Cara"), Member(id="d", name="Dan"), Member(id="e", name="Eve")]
    tasks = [
        Task(id="1", assigned_to="b", status="in_progress", progress_percentage=50),
        Task(id="2", assigned_to="a", status="in_progress", progress_percentage=50),
        Task(id="3", assigned_to="c", status="in_progress", progress_percentage=50),
        Task(id="4", assigned_to="c", status="in_progress", progress_percentage=50),
        Task(id="5", assigned_to="d", status="completed", progress_percentage=100),
    ]
    team_index = {"A": tasks}
    board = team_leaderboard(team_index, members, now=NOW)

    assert [e.name for e in board] == ["Dan", "Cara", "Alice", "Bob", "Eve"]
    dan = board[0]
    assert (dan.member_id, dan.assigned, dan.completed, dan.efficiency_score) == ("d", 1, 1, 100)
    assert (board[-1].assigned, board[-1].efficiency_score) == (0, 0)
    assert team_leaderboard(team_index, members, now=NOW) == board


def test_leaderboard_counts_cross_team_task_once():
    tasks = [
        Task(id="t1", assigned_to="lead", subtasks=[
            Subtask(id="s1", assigned_to="ana", progress_percentage=100, status="completed"),
            Subtask(id="s2", assigned_to="ben", progress_percentage=0),
        ]),
    ]
    team_index = index_by_team(tasks, {"ana": "A", "ben": "B", "lead": "A"})
    members = [Member(id="lead", name="Lea"), Member(id="ana", name="Ana"), Member(id="ben", name="Ben")]
    board = {e.member_id: e for e in team_leaderboard(team_index, members, now=NOW)}

    assert board["lead"].assigned == 1
    assert board["lead"].efficiency_score == 50
    assert board["ana"].efficiency_score == 100
    assert board["ben"].assigned == 1


def test_leaderboard_for_one_team_sees_only_that_team():
    tasks = [
        Task(id="t1", subtasks=[
            Subtask(id="s1", assigned_to="ana", progress_percentage=80),
            Subtask(id="s2", assigned_to="ben", progress_percentage=20),
        ]),
    ]
    team_index = index_by_team(tasks, {"ana": "A", "ben": "B"})
    board = team_leaderboard({"A": team_index["A"]}, [Member(id="ana", name="Ana"), Member(id="ben", name="Ben")],
                             now=NOW)
    assert [(e.member_id, e.assigned) for e in board] == [("ana", 1), ("ben", 0)]


def test_project_summary_keeps_first_seen_order():
    tasks = [
        Task(id="1", related_project="Zeta", progress_percentage=10),
        Task(id="2", related_project="Alpha", status="completed"),
        Task(id="3", related_project="Zeta", progress_percentage=30),
    ]
    summary = project_summary(index_by_project(tasks), now=NOW)
    assert [s.project_key for s in summary] == ["Zeta", "Alpha"]
    assert summary[0].stats.percentage == 20
    assert summary[1].stats.completed == 1
    assert project_summary({}) == []


def test_team_summary_health():
    team_index = {
        "A": [Task(status="completed", progress_percentage=100)],
        "B": [Task(status="in_progress", progress_percentage=10, deadline=PAST)],
        "C": [],
    }
    summary = team_summary(team_index, now=NOW)
    assert [(s.team_id, s.health) for s in summary] == [
        ("A", HealthLevel.HEALTHY), ("B", HealthLevel.CRITICAL), ("C", HealthLevel.HEALTHY),
    ]


def test_lead_effectiveness():
    tasks = [
        Task(id="1", assigned_to="lead", status="completed", progress_percentage=100),
        Task(id="2", assigned_to="m1", status="in_progress", progress_percentage=50),
        Task(id="3", assigned_to="m2", progress_percentage=0),
    ]
    members = [Member(id="lead"), Member(id="m1"), Member(id="m2")]
    index = index_by_assignee(tasks, seed_members=members)
    # 0.4 * 100 + 0.4 * 25 + 0.2 * 100
    assert lead_effectiveness("lead", index, members, now=NOW) == 70


def test_lead_effectiveness_with_overdue_and_no_team():
    tasks = [Task(id="1", assigned_to="lead", status="in_progress", progress_percentage=50, deadline=PAST)]
    index = index_by_assignee(tasks)
    # 0.4 * 50 + 0 + 0.2 * 0
    assert lead_effectiveness("lead", index, [Member(id="lead")], now=NOW) == 20


def test_status_breakdown_drops_empty_slices():
    stats = Stats(total=4, completed=2, blocked=1, pending=1)
    assert status_breakdown(stats) == [("Completed", 2), ("Blocked", 1), ("Pending", 1)]
    assert status_breakdown(Stats()) == []


def test_leaderboard_counts_split_task_without_id_once():
    tasks = [
        Task(assigned_to="lead", subtasks=[
            Subtask(assigned_to="ana", progress_percentage=60),
            Subtask(assigned_to="ben", progress_percentage=20),
        ]),
    ]
    team_index = index_by_team(tasks, {"ana": "A", "ben": "B", "lead": "A"})
    members = [Member(id="lead", name="Lea"), Member(id="ana", name="Ana"), Member(id="ben", name="Ben")]
    board = {e.member_id: e for e in team_leaderboard(team_index, members, now=NOW)}

    assert board["lead"].assigned == 1
    assert board["lead"].efficiency_score == 40
    assert board["ana"].assigned == 1
    assert board["ben"].assigned == 1


def test_leaderboard_keeps_distinct_tasks_without_ids():
    tasks = [Task(assigned_to="ana", progress_percentage=10), Task(assigned_to="ana", progress_percentage=30)]
    board = team_leaderboard(index_by_team(tasks, {"ana": "A"}), [Member(id="ana", name="Ana")], now=NOW)
    assert (board[0].assigned, board[0].efficiency_score) == (2, 20)


def test_best_teams_ranking():
    team_index = {
        "A": [Task(progress_percentage=40)],
        "B": [Task(status="completed", progress_percentage=100)],
        "C": [Task(progress_percentage=40), Task(progress_percentage=40)],
        "unassigned": [Task(status="completed", progress_percentage=100)] * 3,
        "D": [],
    }
    ranked = best_teams(team_index, now=NOW)
    assert [s.team_id for s in ranked] == ["B", "C", "A", "D"]
    assert [s.team_id for s in best_teams(team_index, now=NOW, limit=2)] == ["B", "C"]
    assert best_teams({}, now=NOW) == []


def test_overview():
    tasks = [
        Task(task_type="project_task", status="in_progress", progress_percentage=20, deadline=PAST),
        Task(status="completed", progress_percentage=100),
        Task(task_type="project_task", status="completed", progress_percentage=100),
    ]
    ov = overview(tasks, now=NOW)
    assert ov.stats.total == 3
    assert ov.stats.completed == 2
    assert ov.stats.overdue == 1
    assert ov.stats.percentage == 73
    assert ov.health == HealthLevel.AT_RISK
    assert ov.active_projects == 1

    empty = overview([], now=NOW)
    assert (empty.stats, empty.health, empty.active_projects) == (Stats(), HealthLevel.HEALTHY, 0)


def test_effectiveness_rating_tiers():
    assert effectiveness_rating(95) == "Excellent"
    assert effectiveness_rating(80) == "Excellent"
    assert effectiveness_rating(79) == "Good"
    assert effectiveness_rating(60) == "Good"
    assert effectiveness_rating(40) == "Average"
    assert effectiveness_rating(39) == "Needs Improvement"
