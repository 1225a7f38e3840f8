from pyping.apps.constants import CLIENT_STEP_MS
from pyping.core import ExecutionStats, ExitReason, StopSignal
from pyping.transport import TransportError
from .model import PingClient
from .objects import ClientState


def run_client(
    client: PingClient,
    stop: StopSignal | None = None,
    step_ms: int = CLIENT_STEP_MS,
) -> ExecutionStats:
    """
    Цикл обработки событий клиента.

    На каждой итерации выполняются наступившие события клиента (отправка
    запросов), затем один шаг транспорта с таймаутом не больше `step_ms`.
    Цикл заканчивается, когда клиент отправил все запросы и дождался всех
    ответов или таймаутов, когда выставлен флаг `stop` или когда транспорт
    сломался. Face к началу работы должен быть подключен, в конце он
    закрывается. Статистика печатается в любом случае.

    Returns:
        ExecutionStats: статистика выполнения цикла
    """
    stop = stop or StopSignal()
    face = client.face
    t_start = client.scheduler.now
    num_steps = 0
    reason = ExitReason.DRAINED
    message = ''

    client.echo(f"NDNPING {client.config.prefix}")
    client.start()
    try:
        while True:
            if stop.is_set:
                reason, message = stop.reason, stop.message
                break
            if client.state == ClientState.ACTIVE:
                client.scheduler.run()
            if client.finished:
                break

            timeout_ms = step_ms
            next_tick = client.scheduler.time_to_next()
            if next_tick is not None:
                timeout_ms = min(timeout_ms, next_tick * 1000)
            try:
                face.run(timeout_ms)
            except TransportError as e:
                client.logger.error("transport failure: %s", e)
                reason, message = ExitReason.TRANSPORT_ERROR, str(e)
                break
            num_steps += 1
    finally:
        face.destroy()

    client.echo(client.stats.report())
    return ExecutionStats(
        num_steps=num_steps,
        time_elapsed=client.scheduler.now - t_start,
        exit_reason=reason,
        stop_message=message,
    )
