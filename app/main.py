"""
Streamlit Frontend for RentLog

This is the screen landlords use day to day. It renders pages and
forms only; every file operation and record edit goes through the
RentLogWorkspace.

DESIGN PRINCIPLES:
1. Nothing is written to disk until the user presses Save
2. A cancelled or failed open never replaces the records on screen
3. Clear, blocking messages for files that cannot be used
4. Removing a payment needs an explicit confirmation

File access follows RENTLOG_HOST_PROFILE:
- "fallback" (default here): browser upload and download buttons
- "handle": paths on the machine running the app, written in place
"""

import asyncio
from datetime import date
from typing import Optional

import streamlit as st
from pydantic import ValidationError

from rentlog.config import get_settings
from rentlog.models.document import DocumentError, PaymentType
from rentlog.orchestrator import RentLogWorkspace, create_workspace
from rentlog.persistence import FallbackHost, LocalHandleHost, UploadedFile
from rentlog.queries import format_money


st.set_page_config(
    page_title="RentLog",
    page_icon="🏠",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class StreamlitHost(FallbackHost):
    """
    Upload/download host over Streamlit widgets.

    The uploader widget holds the chosen file between reruns; a
    download is parked in session state until its button is rendered,
    and dropped once the records change after it was produced.
    """

    async def prompt_user_upload(self) -> Optional[UploadedFile]:
        uploaded = st.session_state.get("uploaded_file")
        if uploaded is None:
            return None
        return UploadedFile(name=uploaded.name, content=uploaded.getvalue())

    async def offer_download(self, text: str, filename: str) -> None:
        st.session_state.pending_download = (text, filename)


async def _typed_open_path() -> Optional[str]:
    return st.session_state.get("open_path") or None


async def _typed_save_path(suggested_name: str) -> Optional[str]:
    return st.session_state.get("save_path") or None


def get_workspace() -> RentLogWorkspace:
    """One workspace (and so one persistence session) per browser session."""
    if "workspace" not in st.session_state:
        settings = get_settings()
        if settings.host_profile == "handle":
            host = LocalHandleHost(_typed_open_path, _typed_save_path)
        else:
            host = StreamlitHost()
        st.session_state.workspace = create_workspace(host, settings)
    return st.session_state.workspace


def money(amount) -> str:
    return format_money(amount, get_settings().currency_symbol)


def main():
    """Main application entry point."""
    workspace = get_workspace()
    labels = workspace.interface_labels

    st.sidebar.title("🏠 RentLog")
    render_file_controls(workspace)

    if workspace.document is None:
        render_start_page()
        return

    st.sidebar.markdown("---")
    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "👥 Tenants", "🏢 Properties", "💳 Bills & Payments"],
        index=0,
    )
    if workspace.dirty:
        st.sidebar.warning(f"Unsaved changes. Use '{labels.save_label}'.")

    if page == "📊 Dashboard":
        render_dashboard(workspace)
    elif page == "👥 Tenants":
        render_tenants_page(workspace)
    elif page == "🏢 Properties":
        render_properties_page(workspace)
    elif page == "💳 Bills & Payments":
        render_ledger_page(workspace)


def render_file_controls(workspace: RentLogWorkspace):
    """Open / create / save buttons, labelled for the active host profile."""
    labels = workspace.interface_labels

    if labels.can_save_in_place:
        st.sidebar.text_input("File to open", key="open_path")
        st.sidebar.text_input("Save as path", key="save_path")
    else:
        st.sidebar.file_uploader(
            "Choose a RentLog data file",
            type=["json"],
            key="uploaded_file",
        )

    if st.sidebar.button(f"📂 {labels.open_label}"):
        result = run_async(workspace.open_file())
        if result.ok:
            st.rerun()
        elif result.user_message:
            st.sidebar.error(result.user_message)

    if st.sidebar.button("✨ Create New File"):
        run_async(workspace.create_file())
        st.rerun()

    if workspace.document is None:
        return

    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button(f"💾 {labels.save_label}"):
            show_save_result(workspace, run_async(workspace.save()))
    with col2:
        if st.button(f"📝 {labels.save_as_label}"):
            show_save_result(workspace, run_async(workspace.save_as()))

    pending = st.session_state.get("pending_download")
    if pending and st.session_state.get("download_revision") != workspace.revision:
        # Records changed since this download was produced
        st.session_state.pop("pending_download", None)
        pending = None
    if pending:
        text, filename = pending
        st.sidebar.download_button(
            f"⬇️ {filename}",
            data=text.encode("utf-8"),
            file_name=filename,
            mime="application/json",
        )

    if workspace.display_name:
        st.sidebar.caption(f"Current file: {workspace.display_name}")


def show_save_result(workspace: RentLogWorkspace, result):
    if result.success:
        st.session_state.download_revision = workspace.revision
        st.toast(result.user_message)
    elif result.user_message:
        st.sidebar.error(result.user_message)


def render_start_page():
    st.title("Welcome to RentLog")
    st.markdown(
        "Open an existing data file, or create a new one to get started. "
        "Your records stay in that file on your computer."
    )


def render_dashboard(workspace: RentLogWorkspace):
    st.title("📊 Dashboard")
    summary = workspace.summary()

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Tenants", summary.total_tenants)
    col2.metric("Properties", summary.total_properties)
    col3.metric("Rent Expected", money(summary.rent_expected))
    col4.metric("Outstanding Bills", money(summary.outstanding))

    validation = workspace.last_validation
    if validation and validation.issues:
        with st.expander(f"⚠️ {len(validation.issues)} data file notes"):
            for issue in validation.issues:
                st.markdown(f"- **{issue.severity}**: {issue.message}")


def render_tenants_page(workspace: RentLogWorkspace):
    st.title("👥 Tenants")
    document = workspace.document
    summary = workspace.summary()

    if not summary.tenants:
        st.info("No tenants found.")
    for row in summary.tenants:
        col1, col2, col3 = st.columns([3, 2, 2])
        col1.markdown(f"**{row.tenant_name}**  \n{row.property_name}")
        col2.markdown(f"Rent: {money(row.rent)}")
        col3.markdown(f"Outstanding: {money(row.outstanding)}")

    st.markdown("---")
    st.subheader("Add Tenant")
    if not document.properties:
        st.warning("Please add a property before adding a tenant.")
        return

    with st.form("add_tenant", clear_on_submit=True):
        prop = st.selectbox(
            "Property",
            options=document.properties,
            format_func=lambda p: p.name,
        )
        name = st.text_input("Full Name")
        rent = st.number_input("Rent Amount", min_value=0.0, step=500.0)
        move_in = st.date_input("Move-in Date", value=date.today())
        if st.form_submit_button("Save Tenant"):
            try:
                run_async(workspace.add_tenant(prop.id, name, rent, move_in))
                st.rerun()
            except (ValidationError, DocumentError) as e:
                st.error(f"Please fill all fields correctly: {e}")


def render_properties_page(workspace: RentLogWorkspace):
    st.title("🏢 Properties")
    document = workspace.document

    for prop in document.properties:
        with st.expander(f"{prop.name} · {prop.address}"):
            with st.form(f"edit_property_{prop.id}"):
                name = st.text_input("Property Name", value=prop.name)
                address = st.text_input("Address", value=prop.address)
                if st.form_submit_button("Save Changes"):
                    try:
                        run_async(workspace.edit_property(prop.id, name, address))
                        st.rerun()
                    except ValidationError:
                        st.error("Property name and address cannot be empty.")

    st.subheader("Add Property")
    with st.form("add_property", clear_on_submit=True):
        name = st.text_input("Property Name")
        address = st.text_input("Address")
        if st.form_submit_button("Add Property"):
            try:
                run_async(workspace.add_property(name, address))
                st.rerun()
            except ValidationError:
                st.error("Property name and address cannot be empty.")


def render_ledger_page(workspace: RentLogWorkspace):
    st.title("💳 Bills & Payments")
    document = workspace.document
    if not document.tenants:
        st.info("Add a tenant first.")
        return

    tenant = st.selectbox(
        "Tenant",
        options=document.tenants,
        format_func=lambda t: f"{t.name} ({document.property_name_for(t)})",
    )

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Bills")
        for bill in tenant.bills:
            status = f"paid {bill.paid_on.isoformat()}" if bill.is_paid else "unpaid"
            st.markdown(f"- {money(bill.amount)} due {bill.due_date.isoformat()} ({status})")
            if not bill.is_paid and st.button("Mark paid", key=f"pay_bill_{bill.id}"):
                run_async(workspace.mark_bill_paid(tenant.id, bill.id, date.today()))
                st.rerun()

        with st.form("add_bill", clear_on_submit=True):
            amount = st.number_input("Bill Amount", min_value=0.0, step=100.0)
            due = st.date_input("Due Date", value=date.today())
            if st.form_submit_button("Add Bill"):
                try:
                    run_async(workspace.add_bill(tenant.id, amount, due))
                    st.rerun()
                except ValidationError:
                    st.error("Bill amount must be greater than zero.")

    with col2:
        st.subheader("Payments")
        for payment in tenant.payments:
            st.markdown(
                f"- {money(payment.amount)} on {payment.payment_date.isoformat()} "
                f"({payment.payment_type.value}) {payment.notes or ''}"
            )
            confirm = st.checkbox("Confirm removal", key=f"confirm_{payment.id}")
            if st.button("Remove", key=f"remove_{payment.id}"):
                removed = run_async(workspace.remove_payment(tenant.id, payment.id, confirmed=confirm))
                if removed is None:
                    st.warning("Tick 'Confirm removal' first.")
                else:
                    st.rerun()

        with st.form("add_payment", clear_on_submit=True):
            amount = st.number_input("Payment Amount", min_value=0.0, step=500.0)
            paid_on = st.date_input("Payment Date", value=date.today())
            payment_type = st.selectbox(
                "Type",
                options=list(PaymentType),
                format_func=lambda x: x.value.title(),
            )
            notes = st.text_input("Notes (optional)")
            if st.form_submit_button("Add Payment"):
                try:
                    run_async(workspace.add_payment(tenant.id, amount, paid_on, payment_type, notes))
                    st.rerun()
                except ValidationError:
                    st.error("Payment amount must be greater than zero.")


if __name__ == "__main__":
    main()
