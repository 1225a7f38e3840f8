import random

from pyping.core.logger import PingLogger
from pyping.core.name import Name
from pyping.core.scheduler import Scheduler
from .face import DEFAULT_INTEREST_LIFETIME, Face, TransportError
from .packets import Data, Interest, PacketError, decode_packet


class LocalForwarder:
    """
    Форвардер внутри процесса.

    Пакеты между подключенными к нему `LocalFace` передаются через общий
    планировщик с задержкой `delay` (в одну сторону), каждый пакет может
    быть потерян с вероятностью `loss_prob`. Запросы доставляются в те
    face, у которых зарегистрирован подходящий префикс. Ответы
    возвращаются тем face, которые запрашивали это имя.
    """
    def __init__(
        self,
        delay: float = 0.0,
        loss_prob: float = 0.0,
        scheduler: Scheduler | None = None,
        logger: PingLogger | None = None,
        rng: random.Random | None = None,
    ):
        self.delay = delay
        self.loss_prob = loss_prob
        self.scheduler = scheduler or Scheduler()
        self.logger = logger or PingLogger('pyping.forwarder')
        self._rng = rng or random.Random()
        self._faces: list["LocalFace"] = []
        self._routes: list[tuple[Name, "LocalFace"]] = []
        # PIT форвардера: ключ имени -> face, которые ждут ответ
        self._pit: dict[bytes, list["LocalFace"]] = {}
        self.running = True

        # Statistics:
        self.num_forwarded = 0
        self.num_lost = 0

    def attach(self, face: "LocalFace") -> None:
        if not self.running:
            raise TransportError("local forwarder is not running")
        if face not in self._faces:
            self._faces.append(face)

    def detach(self, face: "LocalFace") -> None:
        if face in self._faces:
            self._faces.remove(face)
        self._routes = [(p, f) for p, f in self._routes if f is not face]
        for faces in self._pit.values():
            while face in faces:
                faces.remove(face)

    def register(self, prefix: Name, face: "LocalFace") -> None:
        self._routes.append((prefix, face))

    def shutdown(self) -> None:
        """Остановить форвардер: все последующие отправки завершаются ошибкой."""
        self.running = False

    def forward(self, src: "LocalFace", packet: Interest | Data) -> None:
        if not self.running:
            raise TransportError("local forwarder is not running")
        if isinstance(packet, Interest):
            key = packet.ndn_name.key()
            self._pit.setdefault(key, []).append(src)
            self.scheduler.schedule(
                packet.lifetime, self._expire, (key, src),
                msg=f"PIT entry {packet.name}")
            self._transmit(self._deliver_interest, src, packet)
        else:
            faces = self._pit.pop(packet.ndn_name.key(), [])
            if not faces:
                self.logger.debug("no PIT entry for %s, dropping", packet.name)
            for face in faces:
                self._transmit(self._deliver_data, face, packet)

    def _transmit(self, handler, face: "LocalFace", packet: Interest | Data) -> None:
        if self._rng.random() < self.loss_prob:
            # Пакет потерян в канале
            self.num_lost += 1
            self.logger.debug("lost %s %s", packet.type, packet.name)
            return
        self.num_forwarded += 1
        self.scheduler.schedule(
            self.delay, handler, (face, packet),
            msg=f"--({packet.type} {packet.name})-->")

    def _deliver_interest(self, scheduler: Scheduler, src: "LocalFace", interest: Interest) -> None:
        name = interest.ndn_name
        for prefix, face in list(self._routes):
            if face is src or not prefix.is_prefix_of(name):
                continue
            if face._on_interest(interest):
                break

    def _deliver_data(self, scheduler: Scheduler, face: "LocalFace", data: Data) -> None:
        if face in self._faces:
            face._on_data(data)

    def _expire(self, scheduler: Scheduler, key: bytes, face: "LocalFace") -> None:
        faces = self._pit.get(key)
        if faces and face in faces:
            faces.remove(face)
            if not faces:
                del self._pit[key]


class LocalFace(Face):
    """Face, подключенный к `LocalForwarder` того же процесса."""
    def __init__(
        self,
        forwarder: LocalForwarder,
        logger: PingLogger | None = None,
        interest_lifetime: float = DEFAULT_INTEREST_LIFETIME,
    ):
        super().__init__(forwarder.scheduler, logger, interest_lifetime)
        self.forwarder = forwarder

    def _connect(self) -> None:
        self.forwarder.attach(self)

    def _disconnect(self) -> None:
        self.forwarder.detach(self)

    def _register(self, prefix: Name) -> None:
        if not self.forwarder.running:
            raise TransportError("local forwarder is not running")
        self.forwarder.register(prefix, self)

    def _send_wire(self, wire: bytes) -> None:
        try:
            packet = decode_packet(wire)
        except PacketError as e:
            raise TransportError(str(e)) from e
        self.forwarder.forward(self, packet)

    def _poll(self, timeout: float) -> None:
        # Все события форвардера - в общем планировщике, поэтому достаточно
        # дождаться ближайшего из них
        self.scheduler.wait(timeout)
