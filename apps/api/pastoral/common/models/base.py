"""Base classes and enums shared across all models."""

from __future__ import annotations

import enum

from sqlalchemy import Enum, MetaData
from sqlalchemy.orm import DeclarativeBase


NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Base(DeclarativeBase):
    metadata = metadata


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    SECRETARY = "SECRETARY"
    FINANCE = "FINANCE"
    MEMBER = "MEMBER"
    COORDENADOR = "COORDENADOR"
    VICE_COORDENADOR = "VICE_COORDENADOR"
    CELEBRANTE = "CELEBRANTE"


class MemberStatus(str, enum.Enum):
    ATIVO = "ativo"
    INATIVO = "inativo"


class BaptismStatus(str, enum.Enum):
    SOLICITADO = "Solicitado"
    EM_TRIAGEM = "Em Triagem"
    AGENDADO = "Agendado"
    CONCLUIDO = "Concluído"


class Gender(str, enum.Enum):
    MALE = "m"
    FEMALE = "f"


class AgeGroup(str, enum.Enum):
    """Child or adult candidate; persisted as the legacy 0/1 ``age`` column."""

    CHILD = "child"
    ADULT = "adult"

    @property
    def code(self) -> int:
        return 0 if self is AgeGroup.CHILD else 1

    @classmethod
    def from_code(cls, code: int | None) -> "AgeGroup | None":
        if code is None:
            return None
        return cls.CHILD if code == 0 else cls.ADULT


class PresenceStatus(str, enum.Enum):
    PENDENTE = "pendente"
    CONFIRMADO = "confirmado"
    AUSENTE = "ausente"


class TransactionType(str, enum.Enum):
    ENTRADA = "entrada"
    SAIDA = "saída"


class RequestType(str, enum.Enum):
    PEDIDO = "pedido"
    IDEIA = "ideia"
    COMPRA = "compra"
    TAREFA = "tarefa"


class Urgency(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


# Column types (stored as the enum values, not the member names)
UserRoleType = Enum(*_values(UserRole), name="user_role")
MemberStatusType = Enum(*_values(MemberStatus), name="member_status")
BaptismStatusType = Enum(*_values(BaptismStatus), name="baptism_status")
GenderType = Enum(*_values(Gender), name="gender")
PresenceStatusType = Enum(*_values(PresenceStatus), name="presence_status")
TransactionTypeType = Enum(*_values(TransactionType), name="transaction_type")
