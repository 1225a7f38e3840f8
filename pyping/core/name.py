from typing import Iterable, Iterator
from urllib.parse import quote, unquote_to_bytes


# Схемы, которые принимаются в URI имени. Печатается всегда "ndn:".
URI_SCHEMES = ('ndn', 'ndnx', 'ccnx')

# Символы, которые не экранируются при выводе компоненты в URI
_SAFE_CHARS = "-._~"
_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")


class MalformedNameError(ValueError):
    """Строка не является корректным URI имени."""
    ...


def _decode_component(text: str, uri: str) -> bytes:
    raw = text.encode('utf-8')
    pos = raw.find(b'%')
    while pos >= 0:
        escape = raw[pos + 1:pos + 3]
        if len(escape) != 2 or not set(escape) <= _HEX_DIGITS:
            raise MalformedNameError(f"bad percent escape in {uri!r}")
        pos = raw.find(b'%', pos + 3)
    return unquote_to_bytes(text)


class Name:
    """
    Иерархическое имя: неизменяемая последовательность компонент (bytes).

    Имена создаются из URI вида `ndn:/a/b/c` (допускаются также схемы
    `ndnx:` и `ccnx:` или URI без схемы) или из списка компонент. Компонента
    `.` пропускается, `..` удаляет предыдущую компоненту. Компоненты
    хранятся в раскодированном виде, при выводе в URI экранируются.
    """
    __slots__ = ('_components',)

    def __init__(self, components: Iterable[bytes | str] = ()):
        self._components: tuple[bytes, ...] = tuple(
            c.encode('utf-8') if isinstance(c, str) else bytes(c)
            for c in components
        )

    @classmethod
    def from_uri(cls, uri: str) -> "Name":
        """
        Разобрать URI имени.

        Raises:
            MalformedNameError: неизвестная схема, нет ведущего `/`,
                некорректное %-экранирование или `..` выше корня
        """
        text = uri.strip()
        scheme, sep, rest = text.partition(':')
        if sep and not scheme.startswith('/'):
            if scheme.lower() not in URI_SCHEMES:
                raise MalformedNameError(f"unknown scheme in {uri!r}")
            text = rest
        if not text.startswith('/'):
            raise MalformedNameError(f"name must start with '/': {uri!r}")
        if text.startswith('//'):
            # ndn://authority/... - авторитет не поддерживается, пропускаем
            text = '/' + text[2:].partition('/')[2]

        components: list[bytes] = []
        for part in text.split('?', 1)[0].split('#', 1)[0].split('/'):
            if not part:
                continue
            value = _decode_component(part, uri)
            if value and set(value) == {ord('.')}:
                # "." - текущий уровень, ".." - подняться, "..." и больше -
                # компонента из len - 3 точек
                if value == b'.':
                    continue
                if value == b'..':
                    if not components:
                        raise MalformedNameError(f"'..' above root in {uri!r}")
                    components.pop()
                    continue
                value = value[3:]
            components.append(value)
        return cls(components)

    def append(self, component: bytes | str | int) -> "Name":
        """Вернуть новое имя с добавленной в конец компонентой."""
        if isinstance(component, int):
            component = str(component)
        return Name(self._components + (component,))

    def is_prefix_of(self, other: "Name") -> bool:
        return self._components == other._components[:len(self._components)]

    @property
    def components(self) -> tuple[bytes, ...]:
        return self._components

    def key(self) -> bytes:
        """
        Непрозрачный ключ имени для хеш-таблиц: компоненты, каждая
        с префиксом длины. Разные имена дают разные ключи.
        """
        return b''.join(
            len(c).to_bytes(4, 'big') + c for c in self._components
        )

    def to_uri(self) -> str:
        if not self._components:
            return 'ndn:/'
        parts = []
        for c in self._components:
            if set(c) <= {ord('.')}:
                # Пустая компонента и компоненты из точек: "..." + точки
                c = b'...' + c
            parts.append(quote(c, safe=_SAFE_CHARS))
        return 'ndn:/' + '/'.join(parts)

    def __len__(self):
        return len(self._components)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Name(self._components[index])
        return self._components[index]

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._components)

    def __eq__(self, other):
        if not isinstance(other, Name):
            return NotImplemented
        return self._components == other._components

    def __hash__(self):
        return hash(self._components)

    def __str__(self):
        return self.to_uri()

    def __repr__(self):
        return f"Name({self.to_uri()!r})"
