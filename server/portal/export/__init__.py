"""Report export: section builders and renderers."""

from portal.export.renderers import Exporter, ReportlabExporter

__all__ = ["Exporter", "ReportlabExporter"]
