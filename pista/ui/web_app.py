"""NiceGUI web UI for the Pista training log."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Sequence, cast

from loguru import logger
from nicegui import ui

from pista.core.state import FormState
from pista.training.builder import (
    DraftBlock,
    DraftSegment,
    TrainingValidationError,
    build_block,
    build_segment,
    duplicate_last,
    remove_draft,
)
from pista.training.export import (
    build_report_html,
    export_report_html,
    export_training_csv,
)
from pista.training.formatting import format_date, format_duration, format_number
from pista.training.history_store import TrainingStore
from pista.training.model import BlockKind, Category, DayOfWeek, TrainingRecord
from pista.training.pace import total_duration
from pista.training.stats import compute_stats, find_record, latest_record
from pista.training.tables import (
    TableSection,
    record_blocks,
    record_segments,
    render_training_tables,
    section_cells,
    section_headers,
    segment_chart,
)

PACE_COLOR = "rgb(14, 165, 233)"
TIME_COLOR = "rgb(245, 158, 11)"


def _table_payload(section: TableSection) -> tuple[list[dict[str, Any]], list[dict[str, str]]]:
    columns = [
        {"name": f"c{i}", "label": header, "field": f"c{i}", "align": "left"}
        for i, header in enumerate(section_headers(section))
    ]
    rows = [
        {f"c{i}": cell for i, cell in enumerate(cells)} for cells in section_cells(section)
    ]
    return columns, rows


def _chart_options(
    title: str,
    labels: Sequence[str],
    values: Sequence[float],
    *,
    chart_type: str,
    color: str,
) -> dict[str, Any]:
    return {
        "title": {"text": title, "left": "center", "textStyle": {"fontSize": 13}},
        "tooltip": {"trigger": "axis"},
        "xAxis": {"type": "category", "data": list(labels)},
        "yAxis": {"type": "value", "min": 0},
        "series": [
            {
                "type": chart_type,
                "data": list(values),
                "itemStyle": {"color": color},
                "lineStyle": {"color": color},
                "smooth": False,
            }
        ],
        "grid": {"left": 50, "right": 20, "top": 48, "bottom": 40},
        "animation": False,
    }


def _history_row(record: TrainingRecord) -> dict[str, str]:
    return {
        "id": record.training_id,
        "date": format_date(record.created_at),
        "athlete": record.athlete_name,
        "type": record.category.value,
        "duration": format_duration(total_duration(record)),
    }


def _segment_draft_label(draft: DraftSegment) -> str:
    seg = draft.segment
    text = (
        f"{format_number(seg.distance)}m en {format_duration(seg.time)} "
        f"(Rec: {format_duration(seg.recovery)})"
    )
    return f"{text} · {seg.note}" if seg.note else text


def _block_draft_label(draft: DraftBlock) -> str:
    block = draft.block
    text = f"{format_number(block.time)} min - {format_number(block.distance)}m"
    return f"{text} · {block.note}" if block.note else text


def _append_record(
    store: TrainingStore, record: TrainingRecord
) -> tuple[list[TrainingRecord], str | None]:
    try:
        return store.append(record), None
    except (OSError, ValueError) as exc:
        logger.error(f"Cannot store training {record.training_id}: {exc}")
        return [], f"No se pudo guardar el entrenamiento: {exc}"


def run_web_ui(
    *,
    host: str = "127.0.0.1",
    port: int = 8090,
    data_file: Path | None = None,
    export_dir: Path | None = None,
) -> int:
    store = TrainingStore(data_file)
    form = FormState()
    history: list[TrainingRecord] = store.load()
    logger.info(f"Loaded {len(history)} trainings from {store.path}")

    ui.add_head_html(
        """
        <style>
          :root {
            --pt-accent: #0ea5e9;
            --pt-surface: #ffffff;
            --pt-muted: #64748b;
          }
          body { background: #f1f5f9; font-family: Arial, "Segoe UI", sans-serif; }
          .pt-hero {
            background: linear-gradient(135deg, #0ea5e9 0%, #0369a1 100%);
            color: #ffffff;
            border-radius: 14px;
          }
          .pt-card { background: var(--pt-surface); border-radius: 12px; }
          .pt-kpi-value { font-size: 1.6rem; font-weight: 700; color: #0f172a; }
          .pt-muted { color: var(--pt-muted); }
        </style>
        """
    )

    with ui.column().classes("w-full items-center p-6 gap-1 pt-hero"):
        ui.label("Registro de Entrenamientos").classes("text-3xl font-bold")
        ui.label("Series, fartlek y potencia aeróbica").classes("text-base")

    kpi_labels: dict[str, ui.label] = {}
    with ui.grid().classes("w-full grid-cols-1 sm:grid-cols-2 lg:grid-cols-4 gap-4"):
        for key, title, color in (
            ("total", "Total Entrenamientos", "#0EA5E9"),
            ("segments", "Total de Series", "#10B981"),
            ("power", "Entr. P. Aeróbica", "#F59E0B"),
            ("athletes", "Usuarios Activos", "#8B5CF6"),
        ):
            with ui.card().classes("w-full pt-card").style(f"border-left: 6px solid {color};"):
                ui.label(title).classes("text-sm pt-muted")
                kpi_labels[key] = ui.label("0").classes("pt-kpi-value")

    with ui.tabs().classes("w-full") as tabs:
        tab_new = ui.tab("Nuevo Entrenamiento")
        tab_results = ui.tab("Resultados")
        tab_history = ui.tab("Historial")

    with ui.tab_panels(tabs, value=tab_new).classes("w-full"):
        with ui.tab_panel(tab_new):
            with ui.card().classes("w-full pt-card"):
                with ui.row().classes("w-full items-end gap-4"):
                    athlete_input = ui.input("Nombre del Atleta").classes("min-w-[240px]")
                    day_select = ui.select(
                        [d.value for d in DayOfWeek], value=form.day.value, label="Día"
                    )
                    type_select = ui.select(
                        [c.value for c in Category],
                        value=form.category.value,
                        label="Tipo de Entrenamiento",
                    ).classes("min-w-[260px]")

            with ui.card().classes("w-full pt-card") as segment_card:
                ui.label("Añadir Series").classes("text-lg font-semibold")
                with ui.row().classes("w-full items-end gap-2"):
                    seg_distance = ui.number("Distancia (m)", min=0, placeholder="ej. 400")
                    seg_time_min = ui.number("Tiempo (min)", min=0)
                    seg_time_sec = ui.number("Tiempo (seg)", min=0, max=59)
                    seg_rec_min = ui.number("Rec. (min)", min=0)
                    seg_rec_sec = ui.number("Rec. (seg)", min=0, max=59)
                    seg_note = ui.input("Sensaciones")
                with ui.row().classes("gap-2"):
                    add_segment_btn = ui.button("Añadir Serie")
                    duplicate_segment_btn = ui.button("Duplicar Última").props("outline")
                segment_list = ui.column().classes("w-full gap-1")

            with ui.card().classes("w-full pt-card") as fartlek_card:
                ui.label("Añadir Bloques de Fartlek").classes("text-lg font-semibold")
                with ui.row().classes("w-full items-end gap-2"):
                    fartlek_time = ui.number("Tiempo (min)", min=0, placeholder="ej. 5")
                    fartlek_distance = ui.number("Distancia (m)", min=0, placeholder="ej. 1000")
                    fartlek_note = ui.input("Sensaciones")
                    add_fartlek_btn = ui.button("Añadir Bloque")
                fartlek_list = ui.column().classes("w-full gap-1")

            with ui.card().classes("w-full pt-card") as power_card:
                ui.label("Añadir Bloques de Potencia Aeróbica").classes("text-lg font-semibold")
                with ui.row().classes("w-full items-end gap-2"):
                    power_time = ui.number("Tiempo (min)", min=0)
                    power_distance = ui.number("Distancia (m)", min=0)
                    power_note = ui.input("Sensaciones")
                    add_power_btn = ui.button("Añadir Bloque")
                power_list = ui.column().classes("w-full gap-1")

            with ui.row().classes("w-full justify-end"):
                register_btn = ui.button("Registrar Entrenamiento").props("color=primary")

        with ui.tab_panel(tab_results):
            results_container = ui.column().classes("w-full gap-4")

        with ui.tab_panel(tab_history):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Historial de Entrenamientos").classes("text-lg font-semibold")
                clear_btn = ui.button("Limpiar Historial").props("color=negative")
            history_container = ui.column().classes("w-full gap-1")

    with ui.dialog() as detail_dialog, ui.card().classes("w-[960px] max-w-[96vw]"):
        detail_container = ui.column().classes("w-full gap-4")
        with ui.row().classes("w-full justify-end"):
            ui.button("Cerrar", on_click=detail_dialog.close).props("outline")

    async def confirm(message: str) -> bool:
        with ui.dialog() as dialog, ui.card():
            ui.label(message)
            with ui.row().classes("w-full justify-end gap-2"):
                ui.button("Cancelar", on_click=lambda: dialog.submit(False)).props("outline")
                ui.button("Aceptar", on_click=lambda: dialog.submit(True)).props(
                    "color=negative"
                )
        result = await dialog
        dialog.delete()
        return bool(result)

    def render_training(container: ui.column, record: TrainingRecord | None) -> None:
        container.clear()
        with container:
            if record is None:
                ui.label(
                    "No hay datos de entrenamiento todavía. "
                    "Registra uno nuevo para ver los resultados."
                ).classes("pt-muted")
                return

            with ui.card().classes("w-full pt-card"):
                ui.label(record.category.value).classes("text-xl font-bold")
                ui.label(f"{record.athlete_name} - {record.day.value}").classes("text-base")
                ui.label(format_date(record.created_at)).classes("text-sm pt-muted")
                with ui.row().classes("gap-6"):
                    ui.label(f"Duración Total: {format_duration(total_duration(record))}")
                    if record.category.has_segments:
                        ui.label(f"Series: {len(record_segments(record))}")
                    if record.category.block_kind is not None:
                        ui.label(f"Bloques: {len(record_blocks(record))}")
                with ui.row().classes("gap-2"):
                    ui.button(
                        "Exportar CSV", on_click=lambda r=record: on_export_csv(r)
                    ).props("outline")
                    ui.button("Imprimir", on_click=lambda r=record: on_print(r)).props("outline")
                    ui.button(
                        "Descargar Informe", on_click=lambda r=record: on_download_report(r)
                    ).props("outline")
                    ui.button(
                        "Eliminar", on_click=lambda r=record: on_delete(r.training_id)
                    ).props("color=negative outline")

            for section in render_training_tables(record):
                ui.label(section.title).classes("text-lg font-semibold")
                columns, rows = _table_payload(section)
                ui.table(columns=columns, rows=rows, row_key="c0").classes("w-full")

            segments = record_segments(record)
            if segments:
                chart = segment_chart(segments)
                with ui.grid().classes("w-full grid-cols-1 md:grid-cols-2 gap-4"):
                    ui.echart(
                        _chart_options(
                            "Ritmo por 100m (segundos)",
                            chart.labels,
                            chart.paces,
                            chart_type="bar",
                            color=PACE_COLOR,
                        )
                    ).classes("w-full h-72")
                    ui.echart(
                        _chart_options(
                            "Tiempo por Serie (segundos)",
                            chart.labels,
                            chart.times,
                            chart_type="line",
                            color=TIME_COLOR,
                        )
                    ).classes("w-full h-72")

    def render_drafts(
        container: ui.column,
        drafts: Sequence[DraftSegment] | Sequence[DraftBlock],
        label_for: Callable[[Any], str],
        on_remove: Callable[[str], None],
    ) -> None:
        container.clear()
        with container:
            for draft in drafts:
                with ui.row().classes("w-full items-center justify-between bg-slate-100 p-2"):
                    ui.label(label_for(draft)).classes("text-sm")
                    ui.button(
                        icon="delete", on_click=lambda t=draft.temp_id: on_remove(t)
                    ).props("flat dense color=negative")

    def refresh_form() -> None:
        segment_card.set_visibility(form.shows_segments)
        fartlek_card.set_visibility(form.shows_fartlek)
        power_card.set_visibility(form.shows_power)
        duplicate_segment_btn.set_enabled(bool(form.segments))
        render_drafts(segment_list, form.segments, _segment_draft_label, on_remove_segment)
        render_drafts(fartlek_list, form.fartlek_blocks, _block_draft_label, on_remove_fartlek)
        render_drafts(power_list, form.power_blocks, _block_draft_label, on_remove_power)

    def refresh_history() -> None:
        history_container.clear()
        with history_container:
            if not history:
                ui.label("No hay entrenamientos en el historial.").classes("pt-muted")
                return
            with ui.grid(columns=5).classes("w-full gap-2 font-semibold"):
                for header in ("Fecha", "Atleta", "Tipo", "Duración", "Acciones"):
                    ui.label(header)
            for record in reversed(history):
                row = _history_row(record)
                with ui.grid(columns=5).classes("w-full gap-2 items-center"):
                    ui.label(row["date"])
                    ui.label(row["athlete"])
                    ui.label(row["type"])
                    ui.label(row["duration"])
                    with ui.row().classes("gap-1"):
                        ui.button(
                            icon="visibility", on_click=lambda t=row["id"]: on_view(t)
                        ).props("flat dense")
                        ui.button(
                            icon="delete", on_click=lambda t=row["id"]: on_delete(t)
                        ).props("flat dense color=negative")

    def refresh_all() -> None:
        stats = compute_stats(history)
        kpi_labels["total"].text = str(stats.total_workouts)
        kpi_labels["segments"].text = str(stats.total_segments)
        kpi_labels["power"].text = str(stats.total_aerobic_power)
        kpi_labels["athletes"].text = str(stats.distinct_athletes)
        clear_btn.set_visibility(bool(history))
        render_training(results_container, latest_record(history))
        refresh_history()
        refresh_form()

    def on_type_change() -> None:
        form.category = Category(str(type_select.value))
        refresh_form()

    def on_add_segment() -> None:
        try:
            draft = build_segment(
                seg_distance.value,
                seg_time_min.value,
                seg_time_sec.value,
                seg_rec_min.value,
                seg_rec_sec.value,
                seg_note.value,
            )
        except TrainingValidationError as exc:
            ui.notify(str(exc), color="negative")
            return
        form.segments = [*form.segments, draft]
        for field in (seg_distance, seg_time_min, seg_time_sec, seg_rec_min, seg_rec_sec):
            field.value = None
        seg_note.value = ""
        refresh_form()

    def on_duplicate_segment() -> None:
        form.segments = cast(list[DraftSegment], duplicate_last(form.segments))
        refresh_form()

    def add_block(kind: BlockKind, time_input: Any, distance_input: Any, note_input: Any) -> None:
        try:
            draft = build_block(
                time_input.value, distance_input.value, note_input.value, kind=kind
            )
        except TrainingValidationError as exc:
            ui.notify(str(exc), color="negative")
            return
        if kind is BlockKind.FARTLEK:
            form.fartlek_blocks = [*form.fartlek_blocks, draft]
        else:
            form.power_blocks = [*form.power_blocks, draft]
        time_input.value = None
        distance_input.value = None
        note_input.value = ""
        refresh_form()

    def on_remove_segment(temp_id: str) -> None:
        form.segments = cast(list[DraftSegment], remove_draft(form.segments, temp_id))
        refresh_form()

    def on_remove_fartlek(temp_id: str) -> None:
        form.fartlek_blocks = cast(list[DraftBlock], remove_draft(form.fartlek_blocks, temp_id))
        refresh_form()

    def on_remove_power(temp_id: str) -> None:
        form.power_blocks = cast(list[DraftBlock], remove_draft(form.power_blocks, temp_id))
        refresh_form()

    def on_register() -> None:
        nonlocal history
        form.athlete_name = str(athlete_input.value or "")
        form.day = DayOfWeek(str(day_select.value))
        form.category = Category(str(type_select.value))
        try:
            record = form.build_record()
        except TrainingValidationError as exc:
            ui.notify(str(exc), color="negative")
            return
        stored, error = _append_record(store, record)
        if error is not None:
            ui.notify(error, color="negative")
            return
        history = stored
        ui.notify("¡Entrenamiento registrado con éxito!", color="positive")
        form.reset()
        athlete_input.value = ""
        day_select.value = form.day.value
        type_select.value = form.category.value
        refresh_all()
        tabs.set_value(tab_results)

    def on_export_csv(record: TrainingRecord) -> None:
        try:
            path = export_training_csv(record, export_dir)
        except OSError as exc:
            logger.error(f"CSV export failed: {exc}")
            ui.notify(f"Ocurrió un error al exportar el CSV: {exc}", color="negative")
            return
        ui.download(str(path), filename=path.name)

    def on_download_report(record: TrainingRecord) -> None:
        try:
            path = export_report_html(record, export_dir)
        except OSError as exc:
            logger.error(f"Report export failed: {exc}")
            ui.notify(f"No se pudo generar el informe: {exc}", color="negative")
            return
        ui.download(str(path), filename=path.name)

    def on_print(record: TrainingRecord) -> None:
        report = json.dumps(build_report_html(record))
        ui.run_javascript(
            f"""
            (() => {{
              const win = window.open('', '_blank');
              if (!win) {{
                alert('Por favor, habilita las ventanas emergentes para poder imprimir el informe.');
                return;
              }}
              win.document.open();
              win.document.write({report});
              win.document.close();
              setTimeout(() => {{ win.focus(); win.print(); }}, 500);
            }})();
            """
        )

    def on_view(training_id: str) -> None:
        record = find_record(history, training_id)
        if record is None:
            ui.notify("Entrenamiento no encontrado", color="negative")
            return
        render_training(detail_container, record)
        detail_dialog.open()

    async def on_delete(training_id: str) -> None:
        nonlocal history
        if not await confirm("¿Estás seguro de que quieres eliminar este entrenamiento?"):
            return
        history = store.remove(training_id)
        detail_dialog.close()
        refresh_all()
        tabs.set_value(tab_history)

    async def on_clear() -> None:
        nonlocal history
        if not await confirm(
            "¿Estás seguro de que quieres borrar TODO el historial? "
            "Esta acción no se puede deshacer."
        ):
            return
        history = store.clear()
        refresh_all()

    type_select.on_value_change(lambda _: on_type_change())
    add_segment_btn.on_click(on_add_segment)
    duplicate_segment_btn.on_click(on_duplicate_segment)
    add_fartlek_btn.on_click(
        lambda: add_block(BlockKind.FARTLEK, fartlek_time, fartlek_distance, fartlek_note)
    )
    add_power_btn.on_click(
        lambda: add_block(BlockKind.AEROBIC_POWER, power_time, power_distance, power_note)
    )
    register_btn.on_click(on_register)
    clear_btn.on_click(on_clear)

    refresh_all()
    ui.run(host=host, port=port, reload=False, title="Pista - Registro de Entrenamientos")
    return 0
