from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, \
    ValidationError, field_validator

from pyping.core.name import MalformedNameError, Name


class PacketError(ValueError):
    """Датаграмма не является корректным пакетом."""
    ...


class _Packet(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        ser_json_bytes='base64',
        val_json_bytes='base64',
    )

    name: str = Field(..., description="Canonical name URI")

    @field_validator('name')
    @classmethod
    def _canonical_name(cls, value: str) -> str:
        try:
            return Name.from_uri(value).to_uri()
        except MalformedNameError as e:
            raise ValueError(str(e)) from e

    @property
    def ndn_name(self) -> Name:
        return Name.from_uri(self.name)

    def to_wire(self) -> bytes:
        return self.model_dump_json().encode('utf-8')


class Interest(_Packet):
    type: Literal['interest'] = 'interest'
    lifetime: float = Field(4.0, gt=0, description="Interest lifetime, s")


class Data(_Packet):
    type: Literal['data'] = 'data'
    content: bytes = b''
    freshness: int | None = Field(None, ge=0, description="FreshnessSeconds")
    signature: str = Field('', description="Hex-encoded signature")


Packet = Annotated[Union[Interest, Data], Field(discriminator='type')]
_packet_adapter = TypeAdapter(Packet)


def decode_packet(raw: bytes) -> Interest | Data:
    """
    Разобрать пакет из байтов.

    Raises:
        PacketError: если байты не являются корректным пакетом
    """
    try:
        return _packet_adapter.validate_json(raw)
    except ValidationError as e:
        raise PacketError(f"malformed packet: {e.error_count()} error(s)") from e
