#!/usr/bin/env python3
import argparse
import copy
import json
import logging
import os
import sys
from datetime import datetime, date, timedelta, timezone, tzinfo
from typing import List, Dict, Any, Optional, Iterable, Callable, Tuple, Union

logger = logging.getLogger(__name__)

HABITS_KEY = "habitHero_habits"
BADGES_KEY = "habitHero_badges"
DEFAULT_DATA_DIR = os.path.expanduser("~/.habit-hero")
DEFAULT_PROFILE = "default"
STREAK_WINDOW_DAYS = 365

HABIT_COLORS = [
    "#22c55e",
    "#3b82f6",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#06b6d4",
    "#f97316",
    "#84cc16",
]
DEFAULT_COLOR = HABIT_COLORS[0]

DEFAULT_BADGES: List[Dict[str, Any]] = [
    {
        "id": "1",
        "name": "First Step",
        "description": "Complete your first habit",
        "icon": "🎯",
        "requirement": 1,
        "type": "completion",
        "earned": False,
    },
    {
        "id": "2",
        "name": "3-Day Streak",
        "description": "Maintain a 3-day streak",
        "icon": "🔥",
        "requirement": 3,
        "type": "streak",
        "earned": False,
    },
    {
        "id": "3",
        "name": "7-Day Warrior",
        "description": "Achieve a 7-day streak",
        "icon": "⚔️",
        "requirement": 7,
        "type": "streak",
        "earned": False,
    },
    {
        "id": "4",
        "name": "Consistency King",
        "description": "Complete 30 habits total",
        "icon": "👑",
        "requirement": 30,
        "type": "milestone",
        "earned": False,
    },
    {
        "id": "5",
        "name": "Legend",
        "description": "Achieve a 21-day streak",
        "icon": "🏆",
        "requirement": 21,
        "type": "streak",
        "earned": False,
    },
]

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class HabitHeroError(Exception):
    pass


class StorageError(HabitHeroError):
    """Raised when a persistence backend cannot read or write a key."""


# ---------------------------------------------------------------------------
# Dates


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="seconds") + "Z"


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        if value.endswith("Z"):
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def to_day_key(value: Union[datetime, date], tz: Optional[tzinfo] = None) -> str:
    """Return the ``YYYY-MM-DD`` calendar day of ``value``.

    Aware datetimes are converted to ``tz`` first (the machine's local zone
    when ``tz`` is None). Naive datetimes are read as wall-clock time.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        value = value.date()
    return value.isoformat()


def _day_from_key(value: str) -> date:
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_day_key(value: str) -> date:
    parsed = _day_from_key(value)
    # strptime also accepts unpadded fields such as 2024-1-2.
    if parsed.isoformat() != value:
        raise ValueError(f"day key {value!r} is not in YYYY-MM-DD form")
    return parsed


def days_between(key_a: str, key_b: str) -> int:
    return (parse_day_key(key_b) - parse_day_key(key_a)).days


# ---------------------------------------------------------------------------
# Streaks


def compute_streaks(day_keys: Iterable[str], today: Union[date, str]) -> Dict[str, int]:
    checkins = {_day_from_key(d) for d in day_keys}
    if not checkins:
        return {"current": 0, "longest": 0}
    if isinstance(today, str):
        today = _day_from_key(today)

    dates = sorted(checkins)
    longest = 1
    run = 1
    for idx in range(1, len(dates)):
        if dates[idx] == dates[idx - 1] + timedelta(days=1):
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    longest = max(longest, run)

    # Today may still be in progress, so a gap on today alone is forgiven.
    current = 0
    for offset in range(STREAK_WINDOW_DAYS):
        if today - timedelta(days=offset) in checkins:
            current += 1
        elif offset == 0:
            continue
        else:
            break

    return {"current": current, "longest": longest}


# ---------------------------------------------------------------------------
# Badges


def default_badges() -> List[Dict[str, Any]]:
    return copy.deepcopy(DEFAULT_BADGES)


def _badge_met(badge: Dict[str, Any], habit: Dict[str, Any], total_completions: int) -> bool:
    requirement = badge.get("requirement")
    if not isinstance(requirement, int):
        return False
    badge_type = badge.get("type")
    if badge_type == "completion":
        return len(habit.get("dates_completed", [])) >= requirement
    if badge_type == "streak":
        return habit.get("current_streak", 0) >= requirement
    if badge_type == "milestone":
        return total_completions >= requirement
    return False


def evaluate_badges(
    badges: List[Dict[str, Any]],
    habit: Dict[str, Any],
    total_completions: int,
    now: Optional[datetime] = None,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Award every unearned badge whose threshold the change crossed.

    ``habit`` is the triggering habit after its streaks were recomputed and
    ``total_completions`` the grand total across all habits. Returns the new
    badge list and the badges earned by this call. Earned badges are never
    touched again.
    """
    stamp = _format_timestamp(now or _now_utc())
    updated: List[Dict[str, Any]] = []
    newly_earned: List[Dict[str, Any]] = []
    for badge in badges:
        badge = dict(badge)
        if not badge.get("earned") and _badge_met(badge, habit, total_completions):
            badge["earned"] = True
            badge["date_earned"] = stamp
            newly_earned.append(badge)
        updated.append(badge)
    return updated, newly_earned


# ---------------------------------------------------------------------------
# Storage backends


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStorage:
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: str) -> None:
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path + ".tmp"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc


class PostgresStorage:
    def __init__(self, db_url: str, profile: str = DEFAULT_PROFILE) -> None:
        self.db_url = db_url
        self.profile = profile

    @staticmethod
    def _driver():
        try:
            import psycopg
        except ImportError as exc:
            raise StorageError(
                "Postgres storage needs psycopg installed (pip install 'habit-hero[postgres]')."
            ) from exc
        return psycopg

    def _connect(self, psycopg):
        try:
            return psycopg.connect(self.db_url)
        except psycopg.Error as exc:
            raise StorageError(f"Could not connect to database: {exc}") from exc

    @staticmethod
    def _ensure_table(cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS habit_hero_kv (
                profile TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                updated_at TEXT,
                PRIMARY KEY (profile, key)
            )
            """
        )

    def get(self, key: str) -> Optional[str]:
        psycopg = self._driver()
        conn = self._connect(psycopg)
        try:
            with conn:
                with conn.cursor() as cursor:
                    self._ensure_table(cursor)
                    cursor.execute(
                        "SELECT value FROM habit_hero_kv WHERE profile = %s AND key = %s",
                        (self.profile, key),
                    )
                    row = cursor.fetchone()
        except psycopg.Error as exc:
            raise StorageError(f"Could not read {key!r}: {exc}") from exc
        finally:
            conn.close()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        psycopg = self._driver()
        conn = self._connect(psycopg)
        try:
            with conn:
                with conn.cursor() as cursor:
                    self._ensure_table(cursor)
                    cursor.execute(
                        """
                        INSERT INTO habit_hero_kv (profile, key, value, updated_at)
                        VALUES (%(profile)s, %(key)s, %(value)s, %(updated_at)s)
                        ON CONFLICT (profile, key) DO UPDATE SET
                            value = EXCLUDED.value,
                            updated_at = EXCLUDED.updated_at
                        """,
                        {
                            "profile": self.profile,
                            "key": key,
                            "value": value,
                            "updated_at": _format_timestamp(_now_utc()),
                        },
                    )
        except psycopg.Error as exc:
            raise StorageError(f"Could not write {key!r}: {exc}") from exc
        finally:
            conn.close()


# ---------------------------------------------------------------------------
# Normalisation of stored payloads


def _normalize_habit(item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not isinstance(item, dict) or not isinstance(item.get("id"), int):
        return None
    raw = item.get("dates_completed")
    if not isinstance(raw, list):
        raw = []
    keys = set()
    for value in raw:
        if not isinstance(value, str):
            continue
        try:
            keys.add(_day_from_key(value).isoformat())
        except ValueError:
            continue
    item["dates_completed"] = sorted(keys)
    item.setdefault("name", "")
    item.setdefault("description", "")
    if item.get("color") not in HABIT_COLORS:
        item["color"] = DEFAULT_COLOR
    for field in ("current_streak", "longest_streak"):
        if not isinstance(item.get(field), int):
            item[field] = 0
    return item


def _normalize_badge(item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not isinstance(item, dict) or "id" not in item:
        return None
    item["earned"] = bool(item.get("earned"))
    if not item["earned"]:
        item.pop("date_earned", None)
    elif not item.get("date_earned"):
        item["date_earned"] = _format_timestamp(_now_utc())
    return item


def _decode_collection(raw: Optional[str], key: str) -> Optional[List[Any]]:
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Stored %s is not valid JSON; using defaults", key)
        return None
    if not isinstance(data, list):
        logger.warning("Stored %s is not a list; using defaults", key)
        return None
    return data


def _encode_collection(items: List[Dict[str, Any]]) -> str:
    return json.dumps(items, indent=2, sort_keys=True, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Store


class HabitStore:
    """Owns the habit and badge collections and persists every change."""

    def __init__(
        self,
        storage,
        clock: Optional[Callable[[], datetime]] = None,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self._storage = storage
        self._clock = clock or _now_utc
        self._tz = tz
        self._habits: List[Dict[str, Any]] = []
        self._badges: List[Dict[str, Any]] = default_badges()
        self._last_id = 0
        self._load()

    def _load(self) -> None:
        habits = _decode_collection(self._storage.get(HABITS_KEY), HABITS_KEY)
        if habits is not None:
            self._habits = [h for h in (_normalize_habit(i) for i in habits) if h]
        badges = _decode_collection(self._storage.get(BADGES_KEY), BADGES_KEY)
        if badges is not None:
            self._badges = [b for b in (_normalize_badge(i) for i in badges) if b]
        logger.debug("Loaded %d habit(s) and %d badge(s)", len(self._habits), len(self._badges))

    def _commit(
        self,
        habits: List[Dict[str, Any]],
        badges: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self._storage.set(HABITS_KEY, _encode_collection(habits))
        if badges is not None:
            self._storage.set(BADGES_KEY, _encode_collection(badges))
        self._habits = habits
        if badges is not None:
            self._badges = badges
        logger.debug("Saved %d habit(s)", len(habits))

    @property
    def habits(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._habits)

    @property
    def badges(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._badges)

    @property
    def earned_badges(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(b) for b in self._badges if b.get("earned")]

    @property
    def total_habits_completed(self) -> int:
        return sum(len(h["dates_completed"]) for h in self._habits)

    def today(self) -> date:
        return parse_day_key(self.today_key())

    def today_key(self) -> str:
        return to_day_key(self._clock(), self._tz)

    def get_habit(self, habit_id: int) -> Optional[Dict[str, Any]]:
        for habit in self._habits:
            if habit["id"] == habit_id:
                return copy.deepcopy(habit)
        return None

    def _next_id(self) -> int:
        # Millisecond creation time, kept above every id this store has seen.
        candidate = int(self._clock().timestamp() * 1000)
        floor = max([h["id"] for h in self._habits] + [self._last_id])
        return max(candidate, floor + 1)

    def add_habit(
        self, name: str, description: str = "", color: str = DEFAULT_COLOR
    ) -> Optional[Dict[str, Any]]:
        name = (name or "").strip()
        if not name:
            logger.debug("Ignoring habit with blank name")
            return None
        if color not in HABIT_COLORS:
            logger.warning("Unknown colour %r; using %s", color, DEFAULT_COLOR)
            color = DEFAULT_COLOR
        habit_id = self._next_id()
        habit = {
            "id": habit_id,
            "name": name,
            "description": (description or "").strip(),
            "color": color,
            "dates_completed": [],
            "created_at": _format_timestamp(self._clock()),
            "current_streak": 0,
            "longest_streak": 0,
        }
        self._commit(self.habits + [habit])
        self._last_id = habit_id
        return copy.deepcopy(habit)

    def toggle_completion(self, habit_id: int, day_key: str) -> Optional[Dict[str, Any]]:
        parse_day_key(day_key)
        habits = self.habits
        target = None
        for habit in habits:
            if habit["id"] == habit_id:
                target = habit
                break
        if target is None:
            return None

        dates = set(target["dates_completed"])
        if day_key in dates:
            dates.remove(day_key)
        else:
            dates.add(day_key)
        target["dates_completed"] = sorted(dates)
        streaks = compute_streaks(dates, self.today())
        target["current_streak"] = streaks["current"]
        target["longest_streak"] = streaks["longest"]

        total = sum(len(h["dates_completed"]) for h in habits)
        badges, newly_earned = evaluate_badges(self._badges, target, total, self._clock())
        self._commit(habits, badges)
        for badge in newly_earned:
            logger.info("Badge earned: %s %s", badge.get("icon", ""), badge.get("name", ""))
        return copy.deepcopy(target)

    def delete_habit(self, habit_id: int) -> bool:
        habits = [h for h in self.habits if h["id"] != habit_id]
        if len(habits) == len(self._habits):
            return False
        self._commit(habits)
        return True


# ---------------------------------------------------------------------------
# Read-side projections


def completion_rate(habit: Dict[str, Any], today: date) -> int:
    completed = len(habit.get("dates_completed", []))
    if completed == 0:
        return 0
    created = _parse_timestamp(habit.get("created_at"))
    created_day = created.date() if created else today
    elapsed = max(1, (today - created_day).days + 1)
    return min(100, round(completed / elapsed * 100))


def _week_start(today: date) -> date:
    # Weeks run Sunday to Saturday; weekday() is Monday=0.
    return today - timedelta(days=(today.weekday() + 1) % 7)


def weekly_completions(habits: List[Dict[str, Any]], today: date) -> List[Dict[str, Any]]:
    start = _week_start(today)
    rows = []
    for offset, label in enumerate(WEEKDAY_LABELS):
        key = (start + timedelta(days=offset)).isoformat()
        count = sum(1 for h in habits if key in h.get("dates_completed", []))
        rows.append({"day": label, "date": key, "completions": count})
    return rows


def month_calendar(habits: List[Dict[str, Any]], year: int, month: int) -> List[Dict[str, Any]]:
    first = date(year, month, 1)
    start = _week_start(first)
    total = len(habits)
    cells = []
    for offset in range(42):
        day = start + timedelta(days=offset)
        key = day.isoformat()
        count = sum(1 for h in habits if key in h.get("dates_completed", []))
        cells.append(
            {
                "date": key,
                "in_month": day.month == month,
                "completions": count,
                "rate": count / total if total else 0.0,
            }
        )
    return cells


def progress_overview(habits: List[Dict[str, Any]], today: date) -> Dict[str, int]:
    weekly = weekly_completions(habits, today)
    streaks = [compute_streaks(h.get("dates_completed", []), today) for h in habits]
    return {
        "active_habits": len(habits),
        "total_completions": sum(len(h.get("dates_completed", [])) for h in habits),
        "total_current_streaks": sum(s["current"] for s in streaks),
        "longest_streak": max([s["longest"] for s in streaks] + [0]),
        "weekly_completions": sum(row["completions"] for row in weekly),
    }


# ---------------------------------------------------------------------------
# Configuration


def _data_dir() -> str:
    return os.path.expanduser(os.environ.get("HABIT_HERO_DATA", DEFAULT_DATA_DIR))


def _db_profile() -> str:
    return os.environ.get("HABIT_HERO_PROFILE", DEFAULT_PROFILE)


def _db_url() -> Optional[str]:
    return os.environ.get("DATABASE_URL") or os.environ.get("HABIT_HERO_DB_URL")


def _timezone_policy() -> Optional[tzinfo]:
    policy = os.environ.get("HABIT_HERO_TIMEZONE", "local").strip().lower()
    if policy == "utc":
        return timezone.utc
    if policy != "local":
        logger.warning("Unknown HABIT_HERO_TIMEZONE %r; using local time", policy)
    return None


def _log_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    name = os.environ.get("HABIT_HERO_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def build_storage():
    db_url = _db_url()
    if db_url:
        return PostgresStorage(db_url, _db_profile())
    return FileStorage(_data_dir())


def open_store() -> HabitStore:
    return HabitStore(build_storage(), tz=_timezone_policy())


# ---------------------------------------------------------------------------
# CLI


def _resolve_day(store: HabitStore, value: Optional[str]) -> Optional[str]:
    if value is None:
        return store.today_key()
    try:
        parse_day_key(value)
    except ValueError:
        print(f"Invalid date {value!r}; use YYYY-MM-DD.")
        return None
    return value


def cmd_add(store: HabitStore, args: argparse.Namespace) -> None:
    habit = store.add_habit(args.name, args.description, args.color)
    if habit is None:
        print("Habit name cannot be empty.")
        return
    print(f"Added habit #{habit['id']}: {habit['name']}")


def cmd_list(store: HabitStore, _: argparse.Namespace) -> None:
    habits = store.habits
    if not habits:
        print("No habits yet.")
        return
    today = store.today()
    today_key = today.isoformat()
    for habit in habits:
        status = "✓" if today_key in habit["dates_completed"] else "·"
        streaks = compute_streaks(habit["dates_completed"], today)
        print(
            f"{habit['id']:>3} {status} {habit['name']} "
            f"(streak {streaks['current']}, best {streaks['longest']}, "
            f"{len(habit['dates_completed'])} completions, "
            f"{completion_rate(habit, today)}% rate)"
        )


def cmd_toggle(store: HabitStore, args: argparse.Namespace) -> None:
    day_key = _resolve_day(store, args.date)
    if day_key is None:
        return
    before = {b["id"] for b in store.earned_badges}
    habit = store.toggle_completion(args.id, day_key)
    if habit is None:
        print(f"Habit #{args.id} not found.")
        return
    state = "Completed" if day_key in habit["dates_completed"] else "Uncompleted"
    print(f"{state} habit #{habit['id']}: {habit['name']} ({day_key})")
    print(f"Current streak: {habit['current_streak']} day(s), longest: {habit['longest_streak']}")
    for badge in store.earned_badges:
        if badge["id"] not in before:
            print(f"Badge earned: {badge['icon']} {badge['name']}")


def cmd_delete(store: HabitStore, args: argparse.Namespace) -> None:
    if not store.delete_habit(args.id):
        print(f"Habit #{args.id} not found.")
        return
    print(f"Deleted habit #{args.id}.")


def cmd_badges(store: HabitStore, args: argparse.Namespace) -> None:
    badges = store.badges if args.all else store.earned_badges
    if not badges:
        print("No badges earned yet.")
        return
    for badge in badges:
        mark = "✓" if badge.get("earned") else "·"
        earned = f" (earned {badge['date_earned']})" if badge.get("earned") else ""
        print(f"{mark} {badge.get('icon', '')} {badge.get('name', '')}: {badge.get('description', '')}{earned}")


def cmd_stats(store: HabitStore, _: argparse.Namespace) -> None:
    overview = progress_overview(store.habits, store.today())
    print(f"Active habits: {overview['active_habits']}")
    print(f"Total completions: {overview['total_completions']}")
    print(f"Current streaks (sum): {overview['total_current_streaks']}")
    print(f"Longest streak: {overview['longest_streak']}")
    print(f"This week: {overview['weekly_completions']}")
    print(f"Badges: {len(store.earned_badges)}/{len(store.badges)}")


def cmd_week(store: HabitStore, args: argparse.Namespace) -> None:
    day_key = _resolve_day(store, args.date)
    if day_key is None:
        return
    rows = weekly_completions(store.habits, parse_day_key(day_key))
    print(f"Week: {rows[0]['date']} → {rows[-1]['date']}")
    for row in rows:
        print(f"{row['day']} {row['date']} {'#' * row['completions']} {row['completions']}")


def cmd_calendar(store: HabitStore, args: argparse.Namespace) -> None:
    if args.month:
        try:
            anchor = datetime.strptime(args.month, "%Y-%m").date()
        except ValueError:
            print(f"Invalid month {args.month!r}; use YYYY-MM.")
            return
    else:
        anchor = store.today()
    cells = month_calendar(store.habits, anchor.year, anchor.month)
    print(anchor.strftime("%B %Y"))
    print(" ".join(f"{label:>4}" for label in WEEKDAY_LABELS))
    for row_start in range(0, len(cells), 7):
        row = []
        for cell in cells[row_start:row_start + 7]:
            if not cell["in_month"]:
                row.append(f"{'':>4}")
                continue
            day = int(cell["date"][-2:])
            mark = "*" if cell["completions"] else " "
            row.append(f"{day:>3}{mark}")
        print(" ".join(row))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Local-first habit tracker with streaks and badges")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a new habit")
    add.add_argument("name", help="Habit name")
    add.add_argument("--description", default="", help="Optional description")
    add.add_argument("--color", choices=HABIT_COLORS, default=DEFAULT_COLOR, help="Habit colour")
    add.set_defaults(func=cmd_add)

    list_cmd = sub.add_parser("list", help="List habits")
    list_cmd.set_defaults(func=cmd_list)

    toggle = sub.add_parser("toggle", help="Mark or unmark a habit as done for a day")
    toggle.add_argument("id", type=int, help="Habit id")
    toggle.add_argument("--date", help="Override date (YYYY-MM-DD)")
    toggle.set_defaults(func=cmd_toggle)

    delete = sub.add_parser("delete", help="Delete a habit")
    delete.add_argument("id", type=int, help="Habit id")
    delete.set_defaults(func=cmd_delete)

    badges = sub.add_parser("badges", help="Show earned badges")
    badges.add_argument("--all", action="store_true", help="Include badges not yet earned")
    badges.set_defaults(func=cmd_badges)

    stats = sub.add_parser("stats", help="Show progress overview")
    stats.set_defaults(func=cmd_stats)

    week = sub.add_parser("week", help="Completions per day for the current week")
    week.add_argument("--date", help="Override reference date (YYYY-MM-DD)")
    week.set_defaults(func=cmd_week)

    calendar = sub.add_parser("calendar", help="Month calendar of completions")
    calendar.add_argument("--month", help="Month to show (YYYY-MM)")
    calendar.set_defaults(func=cmd_calendar)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=_log_level(args.verbose), format="%(levelname)s %(name)s: %(message)s")
    try:
        store = open_store()
        args.func(store, args)
    except StorageError as exc:
        print(f"Storage error: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
