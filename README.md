# timetracker

Small building blocks for an application usage time tracker. Only the
Python standard library is needed.

- `timetracker.timeutil`: duration formatting and calendar time ranges
  in UTC (today, yesterday, this week, last week, this month, last month
  and custom ranges).
- `timetracker.validation`: checks for monitor intervals, file paths, API
  keys, model names, URLs, temperatures and token limits. Each check
  raises `ValidationError` (a `ValueError`) when the input is bad.
- `timetracker.timeout`: runs coroutines and blocking calls under a time
  limit and retries with exponential backoff. It also turns errors into
  readable hints and provides a cleanup guard.
- `timetracker.permissions`: reports whether the platform grants what
  window tracking needs.
- `timetracker.functional`: collection and function helpers such as
  `pipe`, `group_by`, `aggregate`, `partition`, `scan`, `windowed`,
  `unique`, `frequency`, `compose` and `curry2`.

Requires Python 3.10 or later.

## Formatting durations

```python
from timetracker.timeutil import format_duration, format_duration_short, duration_between

format_duration(30)          # "30s"
format_duration(61)          # "1m 1s"
format_duration(3661)        # "1h 1m 1s"
format_duration_short(30)    # "<1m"
format_duration_short(3661)  # "1h1m"
```

Both formatters raise `ValueError` for a negative number of seconds.
`duration_between(start, end)` returns the whole seconds from `start` to
`end`. It never returns less than zero.

## Time ranges

```python
from datetime import datetime, timezone
from timetracker.timeutil import RangeKind, TimeRange, today_start, week_start, month_start

now = datetime(2024, 3, 14, 15, 30, tzinfo=timezone.utc)

TimeRange(RangeKind.YESTERDAY).bounds(now)
# (2024-03-13 00:00 UTC, 2024-03-14 00:00 UTC)

span = TimeRange.custom(
    datetime(2024, 1, 1, tzinfo=timezone.utc),
    datetime(2024, 1, 2, tzinfo=timezone.utc),
)
span.contains(datetime(2024, 1, 1, 12, tzinfo=timezone.utc))  # True
```

`bounds(now=None)` and `contains(moment, now=None)` measure from `now`. If
`now` is not given, they use the current time. Naive datetimes are taken
as UTC, and both ends of a range count as inside it.

The start helpers work as follows:

- `today_start` gives midnight of the day.
- `month_start` gives midnight on the first day of the month.
- `week_start` gives this week's Monday at the same time of day as `now`.

A custom range needs both a start and an end. A named range accepts
neither, and passing one raises `ValueError`.

## Validation

```python
from timetracker.validation import (
    ValidationError,
    compose_validators,
    validate_file_path,
    validate_interval,
    validate_url,
)

validate_interval(5)                  # 5
validate_url("https://example.com")  # "https://example.com"

try:
    validate_interval(0)
except ValidationError as exc:
    print(exc)

check_path = compose_validators([validate_file_path, str.strip])
```

The checks accept these values:

| Check | Accepted values |
| --- | --- |
| Intervals | 1 to 3600 seconds |
| Temperatures | 0.0 to 2.0 |
| Token limits | 1 to 100000 |
| File paths | non-empty, none of `< > : " \| ? *` |
| API keys | at least 10 bytes, no spaces |
| Model names | letters, digits, `-`, `_` and `.` |
| URLs | starting with `http://` or `https://` |

`compose_validators` feeds each result into the next validator. The first
error that a validator raises propagates to the caller.

## Timeouts and retries

```python
import asyncio
from timetracker.timeout import RetryConfig, with_retry, with_sync_timeout, with_timeout

async def fetch():
    return 42

async def run():
    value = await with_timeout(fetch(), 1.0, "fetch")
    again = await with_retry(fetch, RetryConfig(max_attempts=5), "fetch")
    return value, again

asyncio.run(run())
with_sync_timeout(lambda: 42, 1.0, "compute")  # 42
```

All time values are in seconds. If the limit passes, `with_timeout` and
`with_sync_timeout` raise `OperationTimeoutError`.

`with_sync_timeout` runs the function in a worker thread and re-raises any
exception the function raises. After a timeout the worker is abandoned,
not stopped.

`with_retry` works as follows:

- By default it makes three attempts.
- It waits `initial_delay` (0.1 s) after the first failure.
- Each later wait is multiplied by `backoff_multiplier` (2.0), up to
  `max_delay` (5 s).
- It re-raises the last error once every attempt has failed.

`TimeoutConfig` collects default limits for slow operations:
`permission_check`, `daemon_start`, `daemon_stop`, `monitor_init` and
`system_info`.

`handle_error(error, operation)` logs the failure. It returns the message
together with a suggestion that depends on whether the error mentions
permissions, a timeout or something not found.

`ResourceGuard` runs its cleanup when the `with` block exits, unless
`disarm()` was called first:

```python
from timetracker.timeout import ResourceGuard

with ResourceGuard(lambda: print("cleaned up")) as guard:
    ...
```

## Permissions

```python
from timetracker.permissions import PermissionManager, PermissionStatus

PermissionStatus.GRANTED.is_available()        # True
PermissionStatus.DENIED.needs_user_action()    # True
PermissionStatus.DENIED.description()          # "被拒绝"

manager = PermissionManager()
print(manager.generate_permission_report())
```

`PermissionManager` checks the running platform. Pass `platform=` (a
`sys.platform` value) to choose another one. Each platform checks the
following:

| Platform | Permissions | How they are checked |
| --- | --- | --- |
| macOS | Screen Recording and Accessibility | `sqlite3`, then `screencapture` or `osascript` |
| Linux | X11 Access | `DISPLAY` and `xdotool getactivewindow` |
| Windows | Window Access | always granted |

Other platforms report no permissions.

`validate_permissions()` sorts the results into available, missing and
warning entries. `show_permission_status()` prints one line per
permission. `request_permissions()` prints step-by-step guidance; on macOS
it also tries to open the matching settings pane.

`check_permissions()` prints the full report. It starts the request flow
only when no permission is available. `auto_request_permissions()` skips
all checks and returns `True`.

## What this package does not do

This package does not watch the active window or detect idle time, and it
does not record or store usage. It has no command-line program, no
interactive screen and no configuration files. It only provides the
helpers described above.