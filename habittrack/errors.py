class HabitTrackerError(Exception):
    """Base class for errors raised by the habit store."""


class HabitNotFound(HabitTrackerError):
    def __init__(self, habit_id: int):
        super().__init__(f"Habit {habit_id} not found")
        self.habit_id = habit_id
