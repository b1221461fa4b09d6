"""Rendering of execution reports for the terminal."""

from __future__ import annotations

from typing import List

from uptimer.application.dtos.report_dto import HostResultDTO, ReportDTO
from uptimer.shared.consts import EnumOutputFormat


def render_report(report: ReportDTO, output_format: EnumOutputFormat) -> str:
    if output_format == EnumOutputFormat.JSON:
        return report.model_dump_json(indent=2)
    return render_text(report)


def render_text(report: ReportDTO) -> str:
    summary = report.summary
    lines: List[str] = [
        f"Realm status: {report.status.value.upper()} "
        f"({summary.total} checks: {summary.successes} succeeded, "
        f"{summary.failures} failed)"
    ]
    if report.cancelled:
        lines.append(f"Run cancelled: {summary.cancelled} checks did not complete")

    for service in report.services:
        lines.append(f"{service.name} [{service.status.value}]")
        for check in service.checks:
            lines.append(f"  {check.name} ({check.checker}) [{check.status.value}]")
            for host in check.hosts:
                lines.append(f"    {_render_host(host)}")

    if summary.failing:
        lines.append("Failures:")
        for failure in summary.failing:
            lines.append(
                f"  {failure.service}.{failure.check}.{failure.host}: {failure.reason}"
            )

    if report.duplicate_service_names:
        names = ", ".join(report.duplicate_service_names)
        lines.append(f"Warning: service names used more than once: {names}")
    for duplicate in report.duplicate_hosts:
        lines.append(
            f"Warning: host '{duplicate.host}' listed more than once "
            f"in service '{duplicate.service}'"
        )

    return "\n".join(lines)


def _render_host(host: HostResultDTO) -> str:
    latency = f" ({host.latency_ms:.1f} ms)" if host.latency_ms is not None else ""
    if host.success:
        return f"ok    {host.host}{latency}"
    return f"FAIL  {host.host}: {host.reason}{latency}"
