"""
Streamlit UI for quotations, proposals and invoices.

Features:
- Tabbed interface for Document Builder, Catalog, Documents and System Info
- Editable line items with read-only derived amounts
- Discount notices shown as toasts
- PDF download, proposals optionally merged with a company profile
"""
import streamlit as st
import pandas as pd
from datetime import datetime

from institute_pricing.catalog.course_catalog import CourseCatalog
from institute_pricing.config.settings import DOCUMENT_POLICIES, get_settings
from institute_pricing.documents.merge import merge_with_fallback
from institute_pricing.documents.render import render_document_pdf
from institute_pricing.engine import PricingCalculator
from institute_pricing.errors import BackendError, PricingError, ValidationFailed
from institute_pricing.services.backend_client import BackendClient
from institute_pricing.services.document_service import DocumentService
from institute_pricing.services.query_cache import QueryCache
from institute_pricing.utils.logging import configure_logging


st.set_page_config(
    page_title="Institute Pricing",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_service():
    """Get cached document service (one query cache per server process)."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    client = BackendClient(settings.backend_url, timeout=settings.request_timeout)
    return DocumentService(client, QueryCache(), settings)


@st.cache_resource
def get_catalog() -> CourseCatalog:
    """Get the session catalog: local export if present, else the backend's."""
    settings = get_settings()
    if settings.catalog_path.exists():
        return CourseCatalog.from_file(settings.catalog_path)
    return get_service().load_catalog()


try:
    service = get_service()
    settings = service.settings
    catalog = get_catalog()
except (PricingError, FileNotFoundError, ValueError) as e:
    st.error(f"System Error: {e}")
    st.stop()


def current_calculator(kind: str) -> PricingCalculator:
    """One calculator per document kind, kept across reruns."""
    key = f"calc_{kind}"
    if key not in st.session_state:
        st.session_state[key] = PricingCalculator.new(kind, catalog, settings)
    return st.session_state[key]


def show_notices(calculator: PricingCalculator):
    for notice in calculator.document.clear_notices():
        st.toast(notice)


def apply_discount(calculator: PricingCalculator, key: str):
    """Push the typed discount through the policy and show the stored value."""
    calculator.set_discount(st.session_state[key])
    st.session_state[key] = f"{calculator.document.discount:g}"


# ============================================================================
# SIDEBAR: Document Kind & Header Details
# ============================================================================
with st.sidebar:
    st.header("📄 Document")

    kind = st.radio("Type", list(DOCUMENT_POLICIES), format_func=str.capitalize, key="doc_kind")
    policy = DOCUMENT_POLICIES[kind]
    calc = current_calculator(kind)

    with st.container(border=True):
        details = {}
        if kind == 'invoice':
            details['student_id'] = st.number_input("Student ID", min_value=1, step=1, value=1)
            details['payment_mode'] = st.selectbox("Payment Mode", ['cash', 'upi', 'bank_transfer', 'cheque', 'card'])
            details['transaction_id'] = st.text_input("Transaction ID") or None
        else:
            details['company_name'] = st.text_input("Company Name")
            details['contact_person'] = st.text_input("Contact Person")
            details['email'] = st.text_input("Email")
            details['phone'] = st.text_input("Phone")
            if kind == 'quotation':
                details['validity'] = st.date_input("Valid Until", value=pd.Timestamp.today() + pd.Timedelta(days=30)).isoformat()
            else:
                details['cover_page'] = st.text_input("Cover Page Title", value="Professional Training Proposal")

        status = st.selectbox("Status", policy.statuses, index=policy.statuses.index(calc.document.status))
        calc.document.status = status

    st.divider()
    st.caption(f"Discount mode: **{policy.discount_mode}**")
    if policy.discount_mode == 'percent':
        st.caption(f"Maximum discount: {settings.max_discount_percent:g}%")


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Institute Pricing")
st.caption(f"v1.0 | {len(catalog)} courses | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3, tab4 = st.tabs(["⚡ Document Builder", "📚 Catalog", "🗂️ Documents", "📊 System"])


# ============================================================================
# TAB 1: DOCUMENT BUILDER
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.8, 1.2], gap="large")

    with col1:
        st.subheader("Add Courses")

        with st.container(border=True):
            units = catalog.active_units()
            labels = {f"{u.id} | {u.name} ({settings.currency} {u.fee:,.2f})": u.id for u in units}

            selected_label = st.selectbox("Course", options=list(labels), key="unit_search", label_visibility="collapsed", placeholder="Type to search courses...")

            c1, c2 = st.columns([1, 4])
            with c1:
                persons = st.number_input("Persons", min_value=1, value=1, step=1, key="single_qty")
            with c2:
                st.write("")
                st.write("")
                if st.button("➕ Add Course", type="primary") and selected_label:
                    calc.add_item(labels[selected_label], persons)
                    st.rerun()

    with col2:
        st.subheader("Summary")

        with st.container(border=True):
            discount_label = "Discount (%)" if policy.discount_mode == 'percent' else f"Discount ({settings.currency})"
            discount_key = f"discount_{kind}"
            if discount_key not in st.session_state:
                st.session_state[discount_key] = f"{calc.document.discount:g}"
            st.text_input(discount_label, key=discount_key, on_change=apply_discount, args=(calc, discount_key))

            doc = calc.document
            m1, m2 = st.columns(2)
            m1.metric("Total Amount", f"{settings.currency} {doc.subtotal:,.2f}")
            m2.metric("Final Amount", f"{settings.currency} {doc.final_amount:,.2f}")
            st.caption(f"Discount applied: {settings.currency} {doc.applied_discount:,.2f}")

            show_notices(calc)
            st.divider()

            btn_col1, btn_col2 = st.columns(2)
            with btn_col1:
                if st.button("📤 Submit", use_container_width=True, type="primary"):
                    try:
                        service.submit(doc, details)
                        st.success(f"{kind.capitalize()} created successfully")
                        del st.session_state[f"calc_{kind}"]
                        st.session_state.pop(f"discount_{kind}", None)
                    except ValidationFailed as e:
                        for err in e.errors:
                            st.error(err)
                    except BackendError as e:
                        st.error(f"Error: {e.message}")
            with btn_col2:
                if st.button("🗑️ Clear", use_container_width=True):
                    del st.session_state[f"calc_{kind}"]
                    st.session_state.pop(f"discount_{kind}", None)
                    st.rerun()

    # Editable Line Items (Full Width)
    if calc.document.items:
        st.markdown("### 📝 Edit Line Items")

        item_df = pd.DataFrame([{
            'Course': item.description,
            'Duration': item.duration,
            'Persons': item.quantity,
            'Rate': item.unit_rate,
            'Total': item.line_total,
            'Remove': False,
        } for item in calc.document.items])

        edited_df = st.data_editor(
            item_df,
            use_container_width=True,
            column_config={
                "Course": st.column_config.TextColumn("Course", disabled=True),
                "Duration": st.column_config.TextColumn("Duration", disabled=True),
                "Persons": st.column_config.NumberColumn("Persons", min_value=1, step=1),
                "Rate": st.column_config.NumberColumn("Rate", disabled=True, format="%.2f"),
                "Total": st.column_config.NumberColumn("Total", disabled=True, format="%.2f"),
                "Remove": st.column_config.CheckboxColumn("Remove"),
            },
            hide_index=True,
            key=f"items_editor_{kind}"
        )

        if st.button("💾 Update Items"):
            for index, row in enumerate(edited_df.itertuples(index=False)):
                calc.set_item_quantity(index, row.Persons)
            for index in sorted(edited_df.index[edited_df['Remove']].tolist(), reverse=True):
                calc.remove_item(index)
            st.rerun()

        st.divider()

        with st.expander("🖨️ Download PDF"):
            profile = None
            if kind == 'proposal':
                upload = st.file_uploader("Company profile (PDF)", type=["pdf"])
                profile = upload.getvalue() if upload else None

            pdf_bytes = render_document_pdf(calc.document, details, settings)
            result = merge_with_fallback(pdf_bytes, profile)
            if result.error:
                st.warning("Company profile could not be attached; downloading the proposal alone.")

            st.download_button(
                "📥 PDF",
                data=result.data,
                file_name=f"{kind.capitalize()}-{datetime.now().strftime('%Y%m%d')}.pdf",
                mime="application/pdf",
                use_container_width=True
            )
    else:
        st.info("No courses added")
        st.caption("At least one course item is required before submitting.")


# ============================================================================
# TAB 2: CATALOG EXPLORER
# ============================================================================
with tab2:
    st.subheader("📚 Course Catalog")

    search_term = st.text_input("Search Catalog", placeholder="Enter course name...", label_visibility="collapsed")
    matches = catalog.search(search_term)
    display_catalog = pd.DataFrame([{
        'ID': u.id, 'Course': u.name, 'Duration': u.duration, 'Fee': u.fee,
    } for u in matches])

    st.dataframe(display_catalog, use_container_width=True, height=600, hide_index=True)
    st.caption(f"Total courses: {len(catalog):,} | Visible: {len(matches):,}")


# ============================================================================
# TAB 3: STORED DOCUMENTS
# ============================================================================
with tab3:
    st.subheader(f"🗂️ {kind.capitalize()}s")
    try:
        records = service.list_documents(kind)
    except BackendError as e:
        st.warning(f"Could not load {kind}s: {e.message}")
        records = []

    if records:
        st.dataframe(pd.DataFrame(records), use_container_width=True, hide_index=True)

        c1, c2, c3 = st.columns([1, 1, 1])
        with c1:
            doc_id = st.number_input("Document ID", min_value=1, step=1)
        with c2:
            new_status = st.selectbox("New Status", policy.statuses, key="new_status")
        with c3:
            st.write("")
            st.write("")
            if st.button("Update Status"):
                try:
                    service.update_status(kind, int(doc_id), new_status)
                    st.toast("Status has been updated successfully")
                    st.rerun()
                except PricingError as e:
                    st.error(str(e))
    else:
        st.info(f"No {kind}s yet.")


# ============================================================================
# TAB 4: SYSTEM INFO
# ============================================================================
with tab4:
    st.header("System Status")

    c1, c2, c3 = st.columns(3)
    c1.metric("Courses", f"{len(catalog):,}")
    c2.metric("Max Discount", f"{settings.max_discount_percent:g}%")
    c3.metric("Currency", settings.currency)

    st.dataframe(pd.DataFrame([
        {'Document': k.capitalize(), 'Discount': p.discount_mode, 'Rounding': p.rounding, 'Statuses': ", ".join(p.statuses)}
        for k, p in DOCUMENT_POLICIES.items()
    ]), use_container_width=True, hide_index=True)

    if st.button("🔄 Reload Catalog", type="secondary"):
        get_catalog.clear()
        service.cache.invalidate("/api/courses")
        fresh = get_catalog()
        for k in DOCUMENT_POLICIES:
            if f"calc_{k}" in st.session_state:
                st.session_state[f"calc_{k}"].refresh_catalog(fresh)
        st.toast("Catalog reloaded")
        st.rerun()
