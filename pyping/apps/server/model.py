from pyping.apps.constants import PING_ACK, PING_COMPONENT
from pyping.core import Name, PingLogger
from pyping.transport import Face, Signer, TransportError, UpcallInfo, \
    UpcallKind, UpcallResult
from .objects import Config


def parse_sequence(component: bytes | str) -> int | None:
    """
    Разобрать номер запроса.

    Номер - непустая строка из десятичных цифр ASCII, без знака, пробелов
    и других символов. Для всего остального возвращается None.
    """
    if isinstance(component, str):
        try:
            component = component.encode('ascii')
        except UnicodeEncodeError:
            return None
    if not component or not component.isdigit():
        return None
    return int(component)


def validate_request(prefix: Name, name: Name) -> int | None:
    """
    Проверить имя запроса и вернуть его номер.

    Префикс сервера (вместе с компонентой `ping`) содержит N компонент.
    Допустимы имена из N + 1 компонент (`<prefix>/<number>`) и из N + 2
    компонент (`<prefix>/<identifier>/<number>`), последняя компонента -
    неотрицательное целое. Для недопустимых имен возвращается None.
    """
    if len(name) not in (len(prefix) + 1, len(prefix) + 2):
        return None
    return parse_sequence(name[-1])


class PingServer:
    """
    Сервер ping: отвечает на корректные запросы `<prefix>/ping/...`
    подписанным ответом с тем же именем.

    Некорректные запросы - фоновый шум в общем пространстве имен, на них
    сервер не отвечает и ничего не пишет в журнал.
    """
    def __init__(
        self,
        config: Config,
        face: Face,
        signer: Signer,
        logger: PingLogger | None = None,
    ):
        self.config = config
        self.face = face
        self.signer = signer
        self.logger = logger or PingLogger('ndnpingserver')

        # Raises MalformedNameError
        self.prefix: Name = Name.from_uri(config.prefix).append(PING_COMPONENT)

        # Statistics:
        self.count = 0

    def start(self) -> None:
        """
        Зарегистрировать фильтр запросов.

        Raises:
            TransportError: если регистрация не удалась
        """
        self.face.set_interest_filter(self.prefix, self.handle_upcall)

    def build_response(self, name: Name) -> bytes:
        """Подписанный ответ на запрос `name`: то же имя, константа PING_ACK."""
        return self.signer.sign(Name(name), PING_ACK, self.config.freshness)

    def handle_upcall(self, kind: UpcallKind, info: UpcallInfo | None) -> UpcallResult:
        if kind != UpcallKind.INTEREST:
            return UpcallResult.OK

        name = info.name
        if validate_request(self.prefix, name) is None:
            return UpcallResult.OK

        try:
            self.face.put(self.build_response(name))
        except TransportError as e:
            self.logger.warning("failed to send response %s: %s", name, e)
            return UpcallResult.OK

        self.count += 1
        self.logger.debug("answered %s (%d total)", name, self.count)
        return UpcallResult.INTEREST_CONSUMED
