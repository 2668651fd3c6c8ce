"""Twice-daily refresh rule for cached rates.

Cached rates go stale when a daily checkpoint (08:00 and 13:00 local time)
has been crossed since they were written. On a new calendar day nothing is
refreshed before the morning checkpoint, so yesterday's rates keep being
served overnight.
"""

from collections.abc import Sequence
from datetime import datetime, time

MORNING_CHECKPOINT = time(8, 0)
AFTERNOON_CHECKPOINT = time(13, 0)


class StalenessPolicy:
	def __init__(self, checkpoints: Sequence[time] = (MORNING_CHECKPOINT, AFTERNOON_CHECKPOINT)):
		if not checkpoints:
			raise ValueError('At least one checkpoint is required')
		self.checkpoints = tuple(sorted(checkpoints))

	def _checkpoints_on(self, now: datetime) -> list[datetime]:
		return [
			now.replace(hour=c.hour, minute=c.minute, second=0, microsecond=0)
			for c in self.checkpoints
		]

	def needs_update(self, last_update: datetime | None, now: datetime) -> bool:
		if last_update is None:
			return True

		if last_update.tzinfo is not None and now.tzinfo is not None:
			last_update = last_update.astimezone(now.tzinfo)

		todays_checkpoints = self._checkpoints_on(now)

		if last_update.date() != now.date():
			return now >= todays_checkpoints[0]

		return any(now >= checkpoint > last_update for checkpoint in todays_checkpoints)


def needs_update(last_update: datetime | None, now: datetime) -> bool:
	return StalenessPolicy().needs_update(last_update, now)
