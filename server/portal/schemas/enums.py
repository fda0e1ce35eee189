"""
Shared enumerations for portal records.

Ranks are listed in hierarchy order (lowest first); that position is the
primary sort key everywhere a list of people is shown.
"""

from enum import Enum
from typing import Dict, List, Optional


class Rank(str, Enum):
    SOLDADO_2 = "Soldado 2ª Classe"
    SOLDADO_1 = "Soldado 1ª Classe"
    CABO = "Cabo"
    SARGENTO_3 = "3º Sargento"
    SARGENTO_2 = "2º Sargento"
    SARGENTO_1 = "1º Sargento"
    SUBTENENTE = "Subtenente"
    ASPIRANTE = "Aspirante a Oficial"
    TENENTE_2 = "2º Tenente"
    TENENTE_1 = "1º Tenente"
    CAPITAO = "Capitão"
    MAJOR = "Major"
    TENENTE_CORONEL = "Tenente-Coronel"
    CORONEL = "Coronel"


RANK_ORDER: List[str] = [rank.value for rank in Rank]
_RANK_POSITION: Dict[str, int] = {value: index for index, value in enumerate(RANK_ORDER)}


def rank_position(rank: Optional[str]) -> int:
    """Hierarchy position of a rank; unknown ranks sort after every known one."""
    if rank is None:
        return len(RANK_ORDER)
    return _RANK_POSITION.get(rank.strip(), len(RANK_ORDER))


class Sector(str, Enum):
    COMANDO = "COMANDO"
    SUBCOMANDO = "SUBCOMANDO"
    ADM = "ADM"
    ROTAM = "ROTAM"
    RPA = "RPA"
    COPOM = "COPOM"
    P2 = "P2"
    RURAL = "RURAL"
    ADC = "ADC"
    LICENCA_MEDICA = "Licença Médica"
    LICENCA_ESPECIAL = "Licença Especial"
    LICENCA_CAPACITACAO = "Licença Capacitação"
    ADIDO = "Adido"
    AFASTADO_JUDICIALMENTE = "Afastado Judicialmente"
    FERIAS = "Férias"
    EM_CURSO = "Em Curso"


SECTOR_ORDER: List[str] = [sector.value for sector in Sector]

LEGACY_SECTOR_ALIASES: Dict[str, str] = {
    "ATESTADO": Sector.LICENCA_MEDICA.value,
    "LICENÇA": Sector.LICENCA_ESPECIAL.value,
    "FERIAS": Sector.FERIAS.value,
    "JUDICE": Sector.AFASTADO_JUDICIALMENTE.value,
}


def canonical_sector(value: str) -> str:
    """Map legacy abbreviated sector names to their canonical value."""
    cleaned = value.strip()
    return LEGACY_SECTOR_ALIASES.get(cleaned, cleaned)


class City(str, Enum):
    MEDIANEIRA = "Medianeira"
    MISSAL = "Missal"
    SMI = "SMI"
    ITAIPULANDIA = "Itaipulândia"
    SERRANOPOLIS = "Serranópolis"


class Platoon(str, Enum):
    PRIMEIRO = "1º Pelotão"
    SEGUNDO = "2º Pelotão"
    NAO_PERTENCE = "Não Pertence"


class LeaveType(str, Enum):
    MEDICAL = "medical"
    SPECIAL = "special"
    TRAINING = "training"
    ATTACHED = "attached"
    JUDICIAL = "judicial"
    VACATION = "vacation"
    COURSE = "course"


LEAVE_TYPE_ORDER: List[str] = [leave_type.value for leave_type in LeaveType]

LEAVE_TYPE_LABELS: Dict[str, str] = {
    LeaveType.MEDICAL.value: "Licença Médica",
    LeaveType.SPECIAL.value: "Licença Especial",
    LeaveType.TRAINING.value: "Licença Capacitação",
    LeaveType.ATTACHED.value: "Adido",
    LeaveType.JUDICIAL.value: "Afastado Judicialmente",
    LeaveType.VACATION.value: "Férias",
    LeaveType.COURSE.value: "Em Curso",
}


def leave_type_label(value: Optional[str]) -> str:
    if not value:
        return ""
    return LEAVE_TYPE_LABELS.get(value, value)


class LeaveStatus(str, Enum):
    ACTIVE = "active"
    RETURNED = "returned"


class VehicleType(str, Enum):
    AUTOMOVEL = "Automóvel"
    MOTOCICLETA = "Motocicleta"
    CAMIONETA = "Camioneta"
    CAMINHONETE = "Caminhonete"
    CAMINHAO = "Caminhão"
    ONIBUS = "Ônibus"
    CAM_TRATOR = "Cam. Trator"
    TRICICLO = "Triciclo"
    QUADRICICLO = "Quadriciclo"
    TRATOR_DE_RODAS = "Trator de Rodas"
    SEMI_REBOQUE = "Semi-Reboque"
    MOTONETA = "Motoneta"
    MICROONIBUS = "Microônibus"
    REBOQUE = "Reboque"
    CICLOMOTOR = "Ciclomotor"
    UTILITARIO = "Utilitário"


STATE_CODES: List[str] = [
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO", "MA", "MT", "MS", "MG", "PA",
    "PB", "PR", "PE", "PI", "RJ", "RN", "RS", "RO", "RR", "SC", "SP", "SE", "TO", "EX",
]


def enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]
