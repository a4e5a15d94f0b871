"""
Streamlit Frontend for Subscription Tracker

Two pages:
1. Subscriptions - every logged subscription, with multi-select delete
2. Log Subscription - the entry form

The UI owns no data. It reads the list from the store and sends every
change through it; the store saves after each one.
"""

import html
from datetime import date

import streamlit as st

from subtracker.config import get_settings
from subtracker.models.subscription import Subscription
from subtracker.orchestrator import create_app_components
from subtracker.store import SubscriptionStore


# Page configuration
st.set_page_config(
    page_title="Subscription Tracker",
    page_icon="🔁",
    layout="centered",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .subscription-card {
        padding: 16px 20px;
        background-color: #ffffff;
        border-radius: 12px;
        box-shadow: 0 5px 5px rgba(0, 0, 0, 0.1);
        margin: 10px 0;
    }
    .subscription-name {
        font-size: 1.25em;
        font-weight: bold;
        color: #404040;
    }
    .subscription-date {
        color: #808080;
        font-size: 0.9em;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_store() -> SubscriptionStore:
    """Create the store and load it once per process (cached)."""
    store, _ = create_app_components()
    return store


def format_amount(amount: float) -> str:
    symbol = get_settings().app.currency_symbol
    return f"{symbol}{amount:.2f}"


def format_renewal_date(value: date) -> str:
    # Medium date style, e.g. "Oct 18, 2026"
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def main():
    """Main application entry point."""
    store = get_store()

    st.sidebar.title("🔁 Subscriptions")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Home", "➕ Log"],
        index=0,
    )

    if page == "🏠 Home":
        render_home_page(store)
    elif page == "➕ Log":
        render_log_page(store)


def render_subscription_card(subscription: Subscription):
    st.markdown(f"""
    <div class="subscription-card">
        <div class="subscription-name">{html.escape(subscription.name)}</div>
        <div>Amount: {format_amount(subscription.amount)}</div>
        <div class="subscription-date">Renewal Date: {format_renewal_date(subscription.renewal_date)}</div>
    </div>
    """, unsafe_allow_html=True)


def render_home_page(store: SubscriptionStore):
    """Render the subscription list."""
    st.title("Subscriptions")

    subscriptions = store.all()

    if not subscriptions:
        st.info("No subscriptions yet. Use the 'Log' page to add your first one.")
        return

    for subscription in subscriptions:
        render_subscription_card(subscription)

    st.markdown("---")

    # Select by id so a list changed by another session is not hit by position
    by_id = {s.id: s for s in subscriptions}
    with st.form("delete_form", clear_on_submit=True):
        selected = st.multiselect(
            "Select subscriptions to delete",
            options=list(by_id),
            format_func=lambda i: (
                f"{by_id[i].name} · {format_amount(by_id[i].amount)}"
                f" · {format_renewal_date(by_id[i].renewal_date)}"
            ),
        )
        if st.form_submit_button("🗑️ Delete Selected") and selected:
            store.remove_ids(selected)
            st.rerun()


def _clear_log_form():
    st.session_state.log_name = ""
    st.session_state.log_amount = ""
    st.session_state.log_renewal_date = date.today()


def _submit_log_form(store: SubscriptionStore):
    added = store.add(
        name=st.session_state.log_name,
        amount=st.session_state.log_amount,
        renewal_date=st.session_state.log_renewal_date,
    )
    # An amount that is not a number leaves the form as it is
    if added is not None:
        _clear_log_form()


def render_log_page(store: SubscriptionStore):
    """Render the log-subscription form."""
    st.title("Log Subscription")

    if "log_renewal_date" not in st.session_state:
        _clear_log_form()

    st.subheader("Subscription Info")
    st.text_input("Name", key="log_name")
    st.text_input("Amount", key="log_amount")
    st.date_input("Renewal Date", key="log_renewal_date")

    st.button(
        "Submit",
        type="primary",
        on_click=_submit_log_form,
        args=(store,),
    )


if __name__ == "__main__":
    main()
