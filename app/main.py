"""
Streamlit Frontend for SmartSpend

The screens the user sees: upload, dashboard, reminders and settings,
plus the assistant panel whenever there are records.

DESIGN PRINCIPLES:
1. One owner of session state: the AppState in st.session_state
2. Every screen is derived from that state on each rerun
3. Destructive actions need explicit confirmation
4. AI calls show a spinner and never lose the user's input on failure
"""

import asyncio
from typing import Optional

import pandas as pd
import plotly.express as px
import streamlit as st

from smartspend.aggregation import build_dashboard
from smartspend.audit import configure_logging, create_correlation_id
from smartspend.config import ConfigurationError, get_settings, validate_all_settings
from smartspend.gateways import EmptySelectionError, ExtractionError
from smartspend.models.assistant import AssistantMode, ChatRole, QuickAction
from smartspend.models.receipt import CHART_CATALOG, ChartType, DashboardData, ImagePayload
from smartspend.orchestrator import (
    EXTRACTION_FAILED_MESSAGE,
    AssistantFlow,
    UploadFlow,
    create_app_components,
)
from smartspend.state import (
    AppState,
    Theme,
    ViewState,
    chart_toggled,
    conversation_changed,
    reminders_changed,
    theme_toggled,
    view_changed,
)


# Page configuration
st.set_page_config(
    page_title="SmartSpend AI",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

COLORS = {
    Theme.LIGHT: ["#0ea5e9", "#6366f1", "#38bdf8", "#818cf8", "#0284c7", "#4f46e5"],
    Theme.SPACE: ["#22d3ee", "#a78bfa", "#34d399", "#f472b6", "#fbbf24", "#60a5fa"],
}

PLOTLY_TEMPLATE = {
    Theme.LIGHT: "plotly_white",
    Theme.SPACE: "plotly_dark",
}


THEME_CSS = {
    Theme.LIGHT: """
<style>
    .stApp {
        background-color: #f8fafc;
    }
    .stButton>button {
        width: 100%;
        border-radius: 12px;
    }
    [data-testid="stMetric"] {
        background-color: #ffffff;
        padding: 16px;
        border-radius: 16px;
        border: 1px solid #e2e8f0;
    }
</style>
""",
    Theme.SPACE: """
<style>
    .stApp {
        background: radial-gradient(circle at top, #1e1b4b 0%, #020617 70%);
        color: #e2e8f0;
    }
    .stButton>button {
        width: 100%;
        border-radius: 12px;
        border: 1px solid #6366f1;
    }
    [data-testid="stMetric"] {
        background-color: rgba(15, 23, 42, 0.7);
        padding: 16px;
        border-radius: 16px;
        border: 1px solid #312e81;
    }
</style>
""",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    configure_logging(get_settings().app.log_level)
    return create_app_components()


def get_state() -> AppState:
    if "app_state" not in st.session_state:
        st.session_state.app_state = AppState()
    return st.session_state.app_state


def set_state(state: AppState) -> None:
    st.session_state.app_state = state


def main():
    """Main application entry point."""
    upload_flow, assistant_flow, _ = get_components()
    state = get_state()

    st.markdown(THEME_CSS[state.theme], unsafe_allow_html=True)
    render_sidebar(state, upload_flow)

    # Route to appropriate page
    state = get_state()
    if state.view == ViewState.UPLOAD:
        render_upload_page(state, upload_flow)
    elif state.view == ViewState.DASHBOARD:
        render_dashboard_page(state, assistant_flow)
    elif state.view == ViewState.REMINDERS:
        render_reminders_page(state)

    # Assistant is always available once there is data
    state = get_state()
    if state.has_records:
        render_assistant(state, assistant_flow)


def render_sidebar(state: AppState, upload_flow: UploadFlow):
    """Navigation, theme toggle, export and clear."""
    st.sidebar.title("💸 SmartSpend AI")

    theme_label = "☀️ Modo Claro" if state.theme == Theme.SPACE else "🚀 Modo Espacial"
    if st.sidebar.button(theme_label):
        set_state(theme_toggled(state))
        st.rerun()

    st.sidebar.markdown("---")

    if st.sidebar.button("📤 Subir boletas"):
        set_state(view_changed(state, ViewState.UPLOAD))
        st.rerun()

    if state.has_records:
        if st.sidebar.button("📊 Dashboard"):
            set_state(view_changed(state, ViewState.DASHBOARD))
            st.rerun()
    if st.sidebar.button("🔔 Recordatorios"):
        set_state(view_changed(state, ViewState.REMINDERS))
        st.rerun()

    render_settings_status()

    if not state.has_records:
        return

    st.sidebar.markdown("---")

    filename, payload = upload_flow.build_export(state)
    st.sidebar.download_button(
        "⬇️ Descargar CSV",
        data=payload,
        file_name=filename,
        mime="text/csv",
        on_click=upload_flow.export_csv,
        args=(state,),
    )

    with st.sidebar.expander("🗑️ Borrar historial"):
        confirmed = st.checkbox(
            "¿Estás seguro que deseas borrar todo el historial de boletas?",
            key="confirm_clear",
        )
        st.button(
            "Borrar todo",
            key="clear_history",
            disabled=not confirmed,
            on_click=clear_history,
            args=(upload_flow,),
        )


def clear_history(upload_flow: UploadFlow):
    """Runs before the next script run, so widget keys can still be reset."""
    set_state(upload_flow.clear(get_state()))
    st.session_state.pop("insights", None)
    st.session_state.confirm_clear = False


def render_settings_status():
    """Show whether the configuration is usable."""
    with st.sidebar.expander("⚙️ Configuración"):
        results = validate_all_settings()
        for name in ("gemini", "app"):
            if results.get(name):
                st.success(f"✓ {name.title()}")
            else:
                st.error(f"✗ {name.title()}: {results.get(f'{name}_error', 'Unknown error')}")


def render_upload_page(state: AppState, upload_flow: UploadFlow):
    """Render the receipt upload page."""
    st.title("Claridad en tus Gastos")
    subtitle = (
        "a la velocidad de la luz" if state.theme == Theme.SPACE
        else "para tu tranquilidad mental"
    )
    st.markdown(
        f"Sube tus boletas y deja que la IA organice tu información financiera {subtitle}."
    )

    if "uploader_key" not in st.session_state:
        st.session_state.uploader_key = 0

    app_settings = get_settings().app
    uploaded_files = st.file_uploader(
        "Selecciona tus boletas",
        type=app_settings.supported_formats_list,
        accept_multiple_files=True,
        key=f"receipt_files_{st.session_state.uploader_key}",
        help="Puedes subir varias imágenes a la vez",
    )

    if uploaded_files:
        st.caption(f"{len(uploaded_files)} imagen(es) seleccionada(s)")

    if st.button("✨ Analizar boletas", type="primary", key="analyze_receipts"):
        images = [
            ImagePayload(data=f.getvalue(), mime_type=f.type or "image/jpeg")
            for f in uploaded_files or []
        ]
        oversized = [
            f.name for f in uploaded_files or []
            if f.size > app_settings.max_upload_size_bytes
        ]
        if oversized:
            st.error(f"Archivos demasiado grandes: {', '.join(oversized)}")
            return

        correlation_id = create_correlation_id()
        with st.spinner("Analizando tus boletas..."):
            try:
                batch = run_async(upload_flow.submit(images, correlation_id))
            except EmptySelectionError as e:
                st.warning(str(e))
                return
            except ConfigurationError as e:
                st.error(f"Configuración incompleta: {e}")
                return
            except ExtractionError:
                # Files stay selected so the user can retry
                st.error(EXTRACTION_FAILED_MESSAGE)
                return

        set_state(upload_flow.apply(get_state(), batch, correlation_id))
        st.session_state.uploader_key += 1
        st.rerun()


def get_insights(state: AppState, assistant_flow: AssistantFlow) -> str:
    """Insights for the current records, refreshed whenever they change."""
    snapshot = state.store.snapshot()
    cached = st.session_state.get("insights")
    if cached is not None and cached[0] == snapshot:
        return cached[1]

    with st.spinner("Generando insights..."):
        try:
            text = run_async(assistant_flow.insights(snapshot))
        except ConfigurationError as e:
            return f"Configuración incompleta: {e}"
    st.session_state.insights = (snapshot, text)
    return text


def render_dashboard_page(state: AppState, assistant_flow: AssistantFlow):
    """Render the spending dashboard."""
    st.title("Resumen Financiero")
    st.markdown(
        "Navegando por tu universo financiero" if state.theme == Theme.SPACE
        else "Una vista clara de tus finanzas"
    )

    data = build_dashboard(
        state.store.snapshot(),
        merchant_top_n=get_settings().app.merchant_top_n,
    )

    col1, col2, col3 = st.columns(3)
    col1.metric("Gasto Total", f"${data.total_spend:,.2f}")
    col2.metric("Mayor Categoría", data.top_category or "N/A")
    col3.metric("Boletas Procesadas", data.record_count)

    st.markdown("---")
    st.subheader("✨ Insights de Inteligencia Artificial")
    st.markdown(get_insights(state, assistant_flow))

    st.markdown("---")
    with st.expander("➕ Personalizar Dashboard"):
        for info in CHART_CATALOG:
            checked = st.checkbox(
                f"{info.title} · {info.description}",
                value=state.charts.is_visible(info.chart),
                key=f"chart_{info.chart.value}",
            )
            if checked != state.charts.is_visible(info.chart):
                set_state(chart_toggled(get_state(), info.chart))
                st.rerun()

    visible = state.charts.visible()
    columns = st.columns(2)
    for index, chart in enumerate(visible):
        with columns[index % 2]:
            render_chart(chart, data, state.theme)

    st.markdown("---")
    st.subheader("Detalle de boletas")
    st.dataframe(
        pd.DataFrame([
            {
                "Fecha": r.date,
                "Comercio": r.merchant,
                "Categoría": r.category,
                "Total": float(r.total),
                "Descripción": r.description,
            }
            for r in state.store.snapshot()
        ]),
        hide_index=True,
        use_container_width=True,
    )


def render_chart(chart: ChartType, data: DashboardData, theme: Theme):
    """Draw one catalog chart from its dataset."""
    info = next(i for i in CHART_CATALOG if i.chart == chart)
    st.markdown(f"**{info.title}**")

    colors = COLORS[theme]
    fig = None

    if chart == ChartType.CATEGORY_PIE and data.category_totals:
        df = pd.DataFrame(
            [{"name": g.key, "value": float(g.total)} for g in data.category_totals]
        )
        fig = px.pie(df, names="name", values="value", hole=0.5,
                     color_discrete_sequence=colors)
    elif chart == ChartType.MERCHANT_BAR and data.merchant_totals:
        df = pd.DataFrame(
            [{"name": g.key, "amount": float(g.total)} for g in data.merchant_totals]
        )
        fig = px.bar(df, x="amount", y="name", orientation="h",
                     color_discrete_sequence=colors[:1])
        fig.update_yaxes(autorange="reversed")
    elif chart == ChartType.DAILY_TREND and data.daily_totals:
        df = pd.DataFrame(
            [{"date": g.key, "amount": float(g.total)} for g in data.daily_totals]
        )
        fig = px.line(df, x="date", y="amount", markers=True,
                      color_discrete_sequence=colors[:1])
    elif chart == ChartType.CATEGORY_COUNT and data.category_counts:
        df = pd.DataFrame(
            [{"name": g.key, "count": g.count} for g in data.category_counts]
        )
        fig = px.bar(df, x="name", y="count",
                     color_discrete_sequence=colors[3:4])

    if fig is None:
        st.info("Sin datos para este gráfico.")
        return

    fig.update_layout(template=PLOTLY_TEMPLATE[theme], height=320,
                      margin=dict(t=20, b=20, l=20, r=20))
    st.plotly_chart(fig, use_container_width=True)


def render_reminders_page(state: AppState):
    """Render the reminders list."""
    st.title("🔔 Recordatorios")

    with st.form("new_reminder", clear_on_submit=True):
        title = st.text_input("Nuevo recordatorio", placeholder="Ej: Pagar la luz")
        if st.form_submit_button("Agregar"):
            set_state(reminders_changed(state, state.reminders.add(title)))
            st.rerun()

    reminders = state.reminders
    st.caption(f"{reminders.pending_count} pendiente(s)")

    for reminder in reminders.items:
        col1, col2, col3 = st.columns([6, 2, 1])
        with col1:
            done = st.checkbox(
                f"{reminder.title} · {reminder.date}",
                value=reminder.completed,
                key=f"reminder_{reminder.id}",
            )
            if done != reminder.completed:
                set_state(reminders_changed(state, reminders.toggle(reminder.id)))
                st.rerun()
        col2.markdown(f"`{reminder.priority.value}`")
        with col3:
            if st.button("✖", key=f"delete_{reminder.id}"):
                set_state(reminders_changed(state, reminders.remove(reminder.id)))
                st.rerun()

    if state.has_records and st.button("← Volver al dashboard"):
        set_state(view_changed(state, ViewState.DASHBOARD))
        st.rerun()


def _update_conversation(coro) -> Optional[str]:
    """Run an assistant call and store the resulting conversation."""
    with st.spinner("Pensando..."):
        try:
            conversation = run_async(coro)
        except ConfigurationError as e:
            return str(e)
    set_state(conversation_changed(get_state(), conversation))
    return None


def render_assistant(state: AppState, assistant_flow: AssistantFlow):
    """Render the assistant panel."""
    st.markdown("---")
    st.subheader("🤖 Asistente Virtual")

    conversation = state.conversation
    records = state.store.snapshot()

    if conversation.mode != AssistantMode.CHAT:
        st.markdown("¿Cómo puedo aportarte claridad hoy?")
        col1, col2, col3, col4 = st.columns(4)
        error = None
        if col1.button("💬 Escribir / Chat"):
            set_state(conversation_changed(
                state, assistant_flow.open_chat(conversation, state.theme)
            ))
            st.rerun()
        if col2.button("🔔 Recordatorios", key="assistant_reminders"):
            set_state(view_changed(state, ViewState.REMINDERS))
            st.rerun()
        if col3.button("💡 Entender mis hábitos"):
            error = _update_conversation(
                assistant_flow.quick_action(QuickAction.ADVICE, records)
            )
            if error is None:
                st.rerun()
        if col4.button("📊 Explicar dashboard"):
            error = _update_conversation(
                assistant_flow.quick_action(QuickAction.DASHBOARD_ANALYSIS, records)
            )
            if error is None:
                st.rerun()
        if error:
            st.error(error)
        return

    for message in conversation.messages:
        avatar = "🧑" if message.role == ChatRole.USER else "🤖"
        with st.chat_message(message.role.value, avatar=avatar):
            st.markdown(message.text)

    with st.form("chat_form", clear_on_submit=True):
        text = st.text_input("Mensaje", placeholder="Escribe algo...")
        col1, col2 = st.columns([4, 1])
        send = col1.form_submit_button("Enviar")
        menu = col2.form_submit_button("MENÚ")

    if menu:
        set_state(conversation_changed(state, conversation.back_to_menu()))
        st.rerun()
    if send and text.strip():
        error = _update_conversation(assistant_flow.send(conversation, text, records))
        if error:
            st.error(error)
        else:
            st.rerun()


if __name__ == "__main__":
    main()
