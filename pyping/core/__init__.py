from .scheduler import Scheduler, EventQueue, EventId, Handler, \
    SchedulingInPastError, ManualClock

from .logger import PingLogger, PingLoggerConfig, PING_LOGGER_FORMAT, \
    ColoredFormatter

from .name import Name, MalformedNameError

from .table import PendingTable, PendingEntry, PendingTableError

from .stats import Statistics, Summary, format_report

from .loop import ExitReason, ExecutionStats, StopSignal
