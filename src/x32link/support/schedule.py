import time


class PeriodicSchedule:
    """
    Decides when a periodic action, such as renewing console subscriptions, is next due.
    A schedule that has never run is due immediately.
    """

    def __init__(self, period, last_run=None, clock=time.monotonic):
        """
        :param period: The period in seconds.
        :param last_run: the time the action last ran, or None if it has not yet run.
        :param clock: the time source used when no current time is given.
        """
        self.last_run = last_run
        self.period = period
        self.clock = clock

    def __call__(self, current_time=None, dry_run=False):
        """return the length of time until the action is due. When the result is <= 0 the action is due
            and the period restarts from current_time.
            :param dry_run: when True, the last run time is not updated
        """
        if current_time is None:
            current_time = self.clock()
        result = self._time_to_run(current_time)
        if not dry_run and result <= 0:
            self.last_run = current_time
        return result

    def due(self, current_time=None):
        """ True if the action should run now. The period restarts when it is. """
        return self(current_time) <= 0

    def reset(self):
        """ makes the action due immediately. """
        self.last_run = None

    def _time_to_run(self, current_time):
        return 0 if self.last_run is None else self.period - (current_time - self.last_run)
