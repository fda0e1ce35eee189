"""
Report section builders.

Builders only shape data into ReportSection/ChartSpec values with their
literal Portuguese labels; rendering is the exporter's job.
"""

from datetime import date, datetime
from typing import List, Sequence

from portal.pipeline.aggregation import KEY_NO, KEY_YES, percentage
from portal.pipeline.ordering import LeavePartition, group_by_sector
from portal.schemas.entities import MedicalLeave, Personnel
from portal.schemas.report_schemas import ChartSpec, ReportSection, ReportStats
from portal.utils.date_parser import format_br_date
from portal.utils.formatters import display_value, format_percentage

PERSONNEL_REPORT_TITLE = "Relatório do Efetivo Policial"
VEHICLE_REPORT_TITLE = "Relatório de Veículos"
MEDICAL_LEAVE_REPORT_TITLE = "Relatório de Licenças Médicas"

PERSONNEL_PDF_FILENAME = "relatorio-efetivo.pdf"
PERSONNEL_CHARTS_FILENAME = "graficos-efetivo.svg"
VEHICLE_PDF_FILENAME = "relatorio-veiculos.pdf"
MEDICAL_LEAVE_PDF_FILENAME = "relatorio-licencas-medicas.pdf"

PERSONNEL_TABLE_HEADER = ["Posto/Grad.", "Nome", "RG", "Telefone", "Cidade", "Setor", "Pelotão"]
LEAVE_TABLE_HEADER = ["Posto/Grad", "Nome Guerra", "CID", "Início", "Término"]
INDETERMINATE_LABEL = "Indeterminado"

PERSONNEL_DISTRIBUTIONS = [
    ("sector", "Distribuição por Setor"),
    ("rank", "Distribuição por Posto/Graduação"),
    ("city", "Distribuição por Cidade"),
    ("platoon", "Distribuição por Pelotão"),
]


def sector_report_filename(day: date) -> str:
    return f"relatorio_efetivo_{day.isoformat()}.txt"


def _distribution_lines(stats: ReportStats, dimension: str) -> List[str]:
    return [
        f"{item.category}: {item.count} ({format_percentage(item.percentage)}%)"
        for item in stats.dimension(dimension)
    ]


def personnel_report_sections(
    people: Sequence[Personnel],
    stats: ReportStats,
    generated_at: datetime,
) -> List[ReportSection]:
    """Summary, four distributions and the detailed list (people already ordered)."""
    sections = [
        ReportSection(
            heading="Resumo Geral",
            lines=[
                f"Data: {generated_at.strftime('%d/%m/%Y %H:%M')}",
                f"Total de Policiais: {stats.total}",
                f"Número de Setores: {len(stats.dimension('sector'))}",
                f"Número de Cidades: {len(stats.dimension('city'))}",
                f"Número de Postos/Graduações: {len(stats.dimension('rank'))}",
            ],
        )
    ]
    for dimension, heading in PERSONNEL_DISTRIBUTIONS:
        sections.append(ReportSection(heading=heading, lines=_distribution_lines(stats, dimension)))

    rows = [list(PERSONNEL_TABLE_HEADER)]
    for person in people:
        rows.append([
            display_value(person.rank),
            display_value(person.name),
            display_value(person.rg),
            display_value(person.phone),
            display_value(person.city),
            display_value(person.sector),
            display_value(person.platoon),
        ])
    sections.append(ReportSection(heading="Lista Detalhada do Efetivo", table=rows))
    return sections


def personnel_chart_specs(stats: ReportStats) -> List[ChartSpec]:
    return [
        ChartSpec(
            title=heading,
            labels=[item.category for item in stats.dimension(dimension)],
            values=[item.count for item in stats.dimension(dimension)],
        )
        for dimension, heading in PERSONNEL_DISTRIBUTIONS
    ]


def sector_text_sections(people: Sequence[Personnel]) -> List[ReportSection]:
    """One block per sector: "<sector> (<n> policiais):" then one line per person."""
    sections = []
    for sector, members in group_by_sector(people).items():
        sections.append(
            ReportSection(
                heading=f"{sector} ({len(members)} policiais):",
                lines=[
                    f"- {display_value(p.rank)} {display_value(p.name)} - RG: {display_value(p.rg)} - Tel: {display_value(p.phone)}"
                    for p in members
                ],
            )
        )
    return sections


def _count_lines(stats: ReportStats, dimension: str) -> List[str]:
    return [f"{item.category}: {item.count}" for item in stats.dimension(dimension)]


def vehicle_report_sections(stats: ReportStats) -> List[ReportSection]:
    return [
        ReportSection(heading="Resumo", lines=[f"Total de Veículos: {stats.total}"]),
        ReportSection(heading="Por Tipo de Veículo", lines=_count_lines(stats, "type")),
        ReportSection(
            heading="Com Chave",
            lines=[
                f"Sim: {stats.count_of('key', KEY_YES)}",
                f"Não: {stats.count_of('key', KEY_NO)}",
            ],
        ),
        ReportSection(heading="Por Estado", lines=_count_lines(stats, "state")),
        ReportSection(heading="Por Cidade", lines=_count_lines(stats, "city")),
    ]


def _leave_row(leave: MedicalLeave) -> List[str]:
    return [
        display_value(leave.rank),
        display_value(leave.war_name),
        leave.cid or "-",
        format_br_date(leave.start_date),
        INDETERMINATE_LABEL if leave.is_indeterminate else format_br_date(leave.end_date),
    ]


def medical_leave_report_sections(partition: LeavePartition) -> List[ReportSection]:
    total = len(partition.active) + len(partition.returned)
    active_pct = format_percentage(percentage(len(partition.active), total))
    returned_pct = format_percentage(percentage(len(partition.returned), total))
    return [
        ReportSection(
            heading="Resumo",
            lines=[
                f"Total de Licenças: {total}",
                f"Em Andamento: {len(partition.active)} ({active_pct}%)",
                f"Retornados: {len(partition.returned)} ({returned_pct}%)",
            ],
        ),
        ReportSection(
            heading="Licenças em Andamento",
            table=[list(LEAVE_TABLE_HEADER)] + [_leave_row(leave) for leave in partition.active],
        ),
        ReportSection(
            heading="Policiais que Retornaram",
            table=[list(LEAVE_TABLE_HEADER)] + [_leave_row(leave) for leave in partition.returned],
        ),
    ]
