"""
In-memory collection of activities keyed by primary key.
"""
from typing import Dict, Iterable, Iterator, List

from activitybook.core.exceptions import ActivityNotFound, DuplicateActivity
from activitybook.domain.activity import Activity


class ActivityBook:
    """Ordered collection of activities, iterated in insertion order."""

    def __init__(self, activities: Iterable[Activity] = ()):
        self._activities: Dict[int, Activity] = {}
        self.reset(activities)

    def reset(self, activities: Iterable[Activity]) -> None:
        """Replace the contents of the book."""
        self._activities = {}
        for activity in activities:
            self.add(activity)

    def add(self, activity: Activity) -> None:
        if activity.primary_key in self._activities:
            raise DuplicateActivity(activity.primary_key)
        self._activities[activity.primary_key] = activity

    def has(self, activity_key: int) -> bool:
        return activity_key in self._activities

    def get(self, activity_key: int) -> Activity:
        try:
            return self._activities[activity_key]
        except KeyError:
            raise ActivityNotFound(activity_key) from None

    def remove(self, activity_key: int) -> Activity:
        try:
            return self._activities.pop(activity_key)
        except KeyError:
            raise ActivityNotFound(activity_key) from None

    def replace(self, activity_key: int, activity: Activity) -> None:
        """Swap the activity stored under activity_key, keeping its position."""
        if activity_key not in self._activities:
            raise ActivityNotFound(activity_key)
        if activity.primary_key != activity_key and activity.primary_key in self._activities:
            raise DuplicateActivity(activity.primary_key)
        self._activities = {
            (activity.primary_key if key == activity_key else key):
                (activity if key == activity_key else existing)
            for key, existing in self._activities.items()
        }

    def find_by_participant(self, participant_id: int) -> List[Activity]:
        """Activities the participant takes part in."""
        return [a for a in self._activities.values() if a.has_participant(participant_id)]

    def __iter__(self) -> Iterator[Activity]:
        return iter(list(self._activities.values()))

    def __len__(self) -> int:
        return len(self._activities)

    def __eq__(self, other):
        if not isinstance(other, ActivityBook):
            return NotImplemented
        return list(self) == list(other)
