import socket

from pyping.core.logger import PingLogger
from pyping.core.name import Name
from pyping.core.scheduler import Scheduler
from .face import DEFAULT_INTEREST_LIFETIME, Face, TransportError
from .packets import Data, PacketError, decode_packet


DEFAULT_PORT = 6363
MAX_DATAGRAM = 65535


class UdpFace(Face):
    """
    Face поверх UDP.

    Клиентский режим (`listen=False`): запросы отправляются на адрес
    (host, port), ответы принимаются с того же сокета.

    Серверный режим (`listen=True`): сокет привязывается к (host, port),
    ответ отправляется на адрес, с которого пришел соответствующий запрос.
    """
    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        listen: bool = False,
        scheduler: Scheduler | None = None,
        logger: PingLogger | None = None,
        interest_lifetime: float = DEFAULT_INTEREST_LIFETIME,
    ):
        super().__init__(scheduler, logger, interest_lifetime)
        self.host = host
        self.port = port
        self.listen = listen
        self.sock: socket.socket | None = None
        # Откуда пришли запросы, на которые еще не ответили. Один и тот же
        # запрос могут прислать несколько клиентов, ответ получает каждый
        self._reply_to: dict[bytes, list[tuple]] = {}

    def _connect(self) -> None:
        try:
            infos = socket.getaddrinfo(
                self.host, self.port, type=socket.SOCK_DGRAM)
            family, _, _, _, addr = infos[0]
            sock = socket.socket(family, socket.SOCK_DGRAM)
            if self.listen:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock.bind(addr)
            else:
                sock.connect(addr)
        except OSError as e:
            raise TransportError(f"{self.host}:{self.port}: {e}") from e
        self.sock = sock

    def _disconnect(self) -> None:
        if self.sock is not None:
            self.sock.close()
            self.sock = None
        self._reply_to.clear()

    def _register(self, prefix: Name) -> None:
        if not self.listen:
            raise TransportError("interest filters need a listening face")

    def _send_wire(self, wire: bytes) -> None:
        try:
            if self.listen:
                packet = decode_packet(wire)
                addrs = self._reply_to.pop(packet.ndn_name.key(), None)
                if not addrs:
                    raise TransportError(f"no pending interest for {packet.name}")
                for addr in addrs:
                    self.sock.sendto(wire, addr)
            else:
                self.sock.send(wire)
        except (OSError, PacketError) as e:
            raise TransportError(str(e)) from e

    def _poll(self, timeout: float) -> None:
        self.sock.settimeout(timeout if timeout > 0 else 0.0)
        try:
            raw, addr = self.sock.recvfrom(MAX_DATAGRAM)
        except (TimeoutError, BlockingIOError):
            return
        except ConnectionRefusedError:
            # ICMP port unreachable на предыдущую отправку: сервер не
            # запущен, запросы просто истекут по таймауту
            self.logger.debug("remote %s:%d refused", self.host, self.port)
            return
        except OSError as e:
            raise TransportError(str(e)) from e

        try:
            packet = decode_packet(raw)
        except PacketError as e:
            self.logger.debug("dropping datagram from %s: %s", addr, e)
            return

        if isinstance(packet, Data):
            if not self.listen:
                self._on_data(packet)
            return
        if self.listen:
            key = packet.ndn_name.key()
            addrs = self._reply_to.get(key)
            if addrs is not None:
                # На этот запрос уже ждут ответ, добавляем еще одного получателя
                if addr not in addrs:
                    addrs.append(addr)
                return
            self._reply_to[key] = [addr]
            if not self._on_interest(packet):
                self._reply_to.pop(key, None)
