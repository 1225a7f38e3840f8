from urllib.parse import parse_qs, urlsplit

from pyping.core.logger import PingLogger
from pyping.core.scheduler import Scheduler
from .face import Face, TransportError, UpcallKind, UpcallResult, UpcallInfo, \
    Closure, DEFAULT_INTEREST_LIFETIME
from .packets import Interest, Data, PacketError, decode_packet
from .local import LocalForwarder, LocalFace
from .udp import UdpFace, DEFAULT_PORT
from .signing import Signer, DigestSigner


DEFAULT_TRANSPORT = f'udp://127.0.0.1:{DEFAULT_PORT}'


def open_face(
    url: str,
    listen: bool = False,
    logger: PingLogger | None = None,
    interest_lifetime: float = DEFAULT_INTEREST_LIFETIME,
    forwarder: LocalForwarder | None = None,
) -> Face:
    """
    Создать face по URL транспорта (без подключения).

    Поддерживаются:

    - `udp://host:port` - UDP, порт по-умолчанию 6363;
    - `local:` или `local:?delay=0.01&loss=0.1` - форвардер внутри
      процесса. Если форвардер не передан, создается новый.

    Raises:
        ValueError: если URL не поддерживается
    """
    parts = urlsplit(url)
    if parts.scheme == 'udp':
        if not parts.hostname:
            raise ValueError(f"no host in transport URL: {url!r}")
        return UdpFace(
            parts.hostname, parts.port or DEFAULT_PORT, listen=listen,
            logger=logger, interest_lifetime=interest_lifetime)
    if parts.scheme == 'local':
        if forwarder is None:
            query = parse_qs(parts.query)
            forwarder = LocalForwarder(
                delay=float(query.get('delay', ['0'])[0]),
                loss_prob=float(query.get('loss', ['0'])[0]),
                scheduler=Scheduler(),
                logger=logger,
            )
        return LocalFace(forwarder, logger=logger,
                         interest_lifetime=interest_lifetime)
    raise ValueError(f"unsupported transport URL: {url!r}")
