import time

from pyping.apps.constants import SERVER_STEP_MS
from pyping.core import ExecutionStats, ExitReason, StopSignal
from pyping.transport import TransportError
from .model import PingServer


def run_server(
    server: PingServer,
    stop: StopSignal | None = None,
    step_ms: int = SERVER_STEP_MS,
    max_steps: int | None = None,
) -> ExecutionStats:
    """
    Цикл обработки событий сервера: шаги транспорта до остановки.

    Своих периодических событий у сервера нет. Цикл заканчивается по флагу
    `stop`, при ошибке транспорта или после `max_steps` шагов (если задано).
    """
    stop = stop or StopSignal()
    face = server.face
    t_start = time.monotonic()
    num_steps = 0
    reason = ExitReason.STOPPED
    message = ''

    try:
        while max_steps is None or num_steps < max_steps:
            if stop.is_set:
                reason, message = stop.reason, stop.message
                break
            try:
                face.run(step_ms)
            except TransportError as e:
                server.logger.error("transport failure: %s", e)
                reason, message = ExitReason.TRANSPORT_ERROR, str(e)
                break
            num_steps += 1
    finally:
        face.destroy()

    server.logger.info("server stopped (%s), %d responses sent",
                       reason.name, server.count)
    return ExecutionStats(
        num_steps=num_steps,
        time_elapsed=time.monotonic() - t_start,
        exit_reason=reason,
        stop_message=message,
    )
