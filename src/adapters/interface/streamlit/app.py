"""Streamlit dashboard entry point."""

from collections.abc import Callable
from decimal import Decimal

import streamlit as st
import altair as alt

from src.adapters.interface.streamlit.trend_chart import (
    build_trend_figure,
    build_trend_series,
)
from src.domain.constants import (
    ALL_CATEGORIES,
    ASSET_CATEGORIES,
    LIABILITY_CATEGORIES,
    AccountKind,
    categories_for,
    get_category_descriptor,
)
from src.domain.errors import DomainError
from src.domain.models import Account, AllocationBreakdown, FamilyRole
from src.infrastructure.container import (
    Workspace,
    build_sign_in_use_case,
    build_workspace,
)
from src.infrastructure.logging.logger import get_usage_logger
from src.infrastructure.settings import AppSettings


WORKSPACE_KEY = "workspace"
NOTICE_KEY = "notice"
OTHER_COLOR = "#9CA3AF"


@st.cache_data(show_spinner=False)
def _load_settings() -> AppSettings:
    """Cached wrapper around AppSettings.from_env for Streamlit sessions."""
    return AppSettings.from_env()


def _check_altair_dependencies() -> tuple[bool, str | None]:
    """Check that numpy and pandas expose what Altair needs.

    Returns:
        Tuple with a success flag and an error message when broken.
    """
    try:
        import numpy
        import pandas
    except ImportError as exc:
        return False, f"Altair dependencies missing: {exc}"
    if not hasattr(numpy, "ndarray"):
        return False, "numpy import is incomplete (no ndarray)."
    if not hasattr(pandas, "Timestamp"):
        return False, "pandas import is incomplete (no Timestamp)."
    return True, None


def _format_currency(value: Decimal, symbol: str) -> str:
    """Format currency values for display."""
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def _format_delta(value: Decimal) -> str:
    """Format delta values for display."""
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:,.2f}"


def _format_delta_with_percent(
    delta: Decimal,
    percent: Decimal | None,
) -> str:
    """Format delta value with its percentage change, when known."""
    if percent is None:
        return _format_delta(delta)
    sign = "+" if percent >= 0 else ""
    return f"{_format_delta(delta)} ({sign}{percent:.2f}%)"


def _category_label(key: str) -> str:
    descriptor = get_category_descriptor(key)
    if descriptor is None:
        return key
    return f"{descriptor.icon} {descriptor.label}"


def _filter_label(key: str) -> str:
    if key == ALL_CATEGORIES:
        return "All"
    return _category_label(key)


def _prepare_donut_chart_data(
    breakdown: AllocationBreakdown,
    symbol: str,
    max_categories: int = 6,
) -> tuple[list[dict[str, str | float]], Decimal]:
    """Prepare donut chart data with a Top-N + Other grouping.

    Args:
        breakdown: Per-category allocation of one account kind.
        symbol: Currency symbol for labels.
        max_categories: Maximum categories to keep before grouping into Other.

    Returns:
        Tuple with Altair-ready chart data and the total amount.
    """
    sorted_items = sorted(
        breakdown.categories,
        key=lambda item: item.amount,
        reverse=True,
    )
    top_items = sorted_items[:max_categories]
    other_items = sorted_items[max_categories:]
    other_amount = sum(
        (item.amount for item in other_items),
        start=Decimal("0"),
    )
    entries = [(item.label, item.amount, item.color) for item in top_items]
    if other_items and other_amount != 0:
        entries.append(("Other", other_amount, OTHER_COLOR))

    total_amount = breakdown.total
    data: list[dict[str, str | float]] = []
    for label, amount, color in entries:
        share = (
            (amount / total_amount) * Decimal("100")
            if total_amount
            else Decimal("0")
        )
        data.append(
            {
                "category": label,
                "amount": float(amount),
                "color": color,
                "amount_label": _format_currency(amount, symbol),
                "share_label": f"{share:.1f}%",
            }
        )
    return data, total_amount


def _render_allocation_chart(
    breakdown: AllocationBreakdown,
    title: str,
    symbol: str,
    max_categories: int = 6,
    chart_size: int = 300,
) -> None:
    """Render a donut chart of amounts by category."""
    st.subheader(title)
    if not breakdown.categories:
        st.info("Nothing to show yet.")
        return
    ok, message = _check_altair_dependencies()
    if not ok:
        st.warning(message)
        return
    data, _ = _prepare_donut_chart_data(
        breakdown,
        symbol,
        max_categories=max_categories,
    )
    hover = alt.selection_point(
        name="hover",
        fields=["category"],
        on="view:mouseover",
        clear="view:mouseout",
        empty=False,
    )
    base = alt.Chart(alt.Data(values=data)).mark_arc(
        innerRadius=chart_size * 0.4,
        cornerRadius=8,
        padAngle=0.02,
    ).encode(
        theta=alt.Theta("amount:Q"),
        color=alt.Color(
            "category:N",
            scale=alt.Scale(
                domain=[row["category"] for row in data],
                range=[row["color"] for row in data],
            ),
            legend=alt.Legend(orient="bottom", title=None, columns=2),
        ),
        opacity=alt.condition(hover, alt.value(1.0), alt.value(0.6)),
        order=alt.Order("amount:Q", sort="descending"),
        tooltip=[
            alt.Tooltip("category:N"),
            alt.Tooltip("amount_label:N"),
            alt.Tooltip("share_label:N"),
        ],
    )
    hover_text = alt.Chart(alt.Data(values=data)).transform_filter(
        hover
    ).mark_text(
        align="center",
        baseline="middle",
        fontSize=16,
        fontWeight="bold",
    ).encode(
        text="amount_label:N"
    )
    chart = alt.layer(base, hover_text).add_params(hover).properties(
        width=chart_size,
        height=chart_size,
    ).configure_view(
        stroke=None
    )
    st.altair_chart(chart, width="stretch")


def _run_action(label: str, action: Callable[[], object]) -> object | None:
    """Run a use case call, report the outcome and log it as usage.

    A successful call stores a notice and reruns the script so every list
    is rendered again from the updated use cases.

    Returns:
        None when a domain error was shown; a successful call reruns the
        script and does not return under Streamlit.
    """
    usage_logger = get_usage_logger()
    try:
        result = action()
    except DomainError as exc:
        usage_logger.warning(f"{label} failed: {exc.message}")
        st.error(exc.message)
        return None
    usage_logger.info(label)
    st.session_state[NOTICE_KEY] = f"{label}: done"
    st.rerun()
    return result


def _show_notice() -> None:
    """Show the outcome of the action that triggered the last rerun."""
    notice = st.session_state.pop(NOTICE_KEY, None)
    if notice:
        st.success(notice)


def _get_workspace() -> Workspace | None:
    return st.session_state.get(WORKSPACE_KEY)


def _sign_in(settings: AppSettings) -> None:
    """Render the sign-in form and store the workspace on success."""
    st.title("Net Worth Dashboard")
    with st.form("sign_in"):
        email = st.text_input("Email")
        submitted = st.form_submit_button("Sign in")
    if not submitted:
        return
    try:
        session = build_sign_in_use_case().execute(email)
        workspace = build_workspace(session, settings=settings)
        workspace.ledger.load()
        workspace.recorder.load()
        workspace.directory.refresh()
    except DomainError as exc:
        st.error(exc.message)
        return
    st.session_state[WORKSPACE_KEY] = workspace
    get_usage_logger().info(f"Sign in {session.user_id}")
    st.rerun()


def _render_dashboard(workspace: Workspace, symbol: str) -> None:
    """Render totals, allocation charts and the net worth trend."""
    ledger = workspace.ledger
    totals = ledger.totals()
    assets_col, liabilities_col, net_worth_col = st.columns(3)
    assets_col.metric("Assets", _format_currency(totals.total_assets, symbol))
    liabilities_col.metric(
        "Liabilities",
        _format_currency(totals.total_liabilities, symbol),
    )
    net_worth_col.metric(
        "Net Worth",
        _format_currency(totals.net_worth, symbol),
    )
    ratio = ledger.asset_ratio()
    st.progress(
        int(ratio),
        text=f"Assets {ratio:.1f}% / Liabilities {100 - ratio:.1f}%",
    )

    chart_left, chart_right = st.columns(2)
    with chart_left:
        _render_allocation_chart(
            ledger.allocation(AccountKind.ASSET),
            "Assets by Category",
            symbol,
        )
    with chart_right:
        _render_allocation_chart(
            ledger.allocation(AccountKind.LIABILITY),
            "Liabilities by Category",
            symbol,
        )

    st.subheader("Net Worth Trend")
    if st.button("Take snapshot"):
        _run_action("Take snapshot", workspace.recorder.take_snapshot)
    series = build_trend_series(workspace.recorder.history)
    if not series.has_enough_data:
        st.info("Take at least two snapshots to see the trend.")
        return
    st.metric(
        "Change since first snapshot",
        _format_currency(series.net_worth[-1], symbol),
        _format_delta_with_percent(series.change, series.change_percent),
    )
    st.plotly_chart(build_trend_figure(series), width="stretch")


def _accounts_table(accounts: list[Account], symbol: str) -> list[dict]:
    """Build dataframe rows for the accounts list."""
    return [
        {
            "Name": f"{account.icon or ''} {account.name}".strip(),
            "Type": account.kind.value.title(),
            "Category": _category_label(account.category),
            "Amount": _format_currency(account.amount, symbol),
            "Note": account.note or "",
        }
        for account in accounts
    ]


def _render_account_form(workspace: Workspace) -> None:
    """Render the add-account form."""
    kind = AccountKind(
        st.radio(
            "Account type",
            [AccountKind.ASSET.value, AccountKind.LIABILITY.value],
            horizontal=True,
        )
    )
    with st.form("add_account", clear_on_submit=True):
        name = st.text_input("Name")
        amount = st.text_input("Amount")
        category = st.selectbox(
            "Category",
            [descriptor.key for descriptor in categories_for(kind)],
            format_func=_category_label,
        )
        note = st.text_input("Note")
        fields = {
            "name": name,
            "amount": amount,
            "category": category,
            "note": note or None,
        }
        if kind is AccountKind.ASSET:
            fields["platform"] = st.text_input("Platform") or None
        else:
            fields["interest_rate"] = (
                st.text_input("Interest rate (%)") or None
            )
            fields["due_date"] = st.text_input("Due date (YYYY-MM-DD)") or None
        submitted = st.form_submit_button("Add account")
    if submitted:
        _run_action(
            f"Add {kind.value}",
            lambda: workspace.ledger.add_account(kind, fields),
        )


def _render_account_editor(workspace: Workspace) -> None:
    """Render amount update and deletion for one account."""
    accounts = workspace.ledger.filter_by_category(ALL_CATEGORIES)
    if not accounts:
        return
    by_id = {account.id: account for account in accounts}
    account_id = st.selectbox(
        "Account",
        list(by_id),
        format_func=lambda key: by_id[key].name,
    )
    new_amount = st.text_input(
        "New amount",
        value=str(by_id[account_id].amount),
    )
    update_col, delete_col = st.columns(2)
    if update_col.button("Update amount"):
        _run_action(
            "Update account",
            lambda: workspace.ledger.update_account(
                account_id,
                {"amount": new_amount},
            ),
        )
    if delete_col.button("Delete account"):
        _run_action(
            "Delete account",
            lambda: workspace.ledger.delete_account(account_id),
        )


def _render_accounts(workspace: Workspace, symbol: str) -> None:
    """Render the accounts list with category filtering and editing."""
    st.subheader("Accounts")
    options = [ALL_CATEGORIES] + [
        descriptor.key
        for descriptor in (*ASSET_CATEGORIES, *LIABILITY_CATEGORIES)
    ]
    category = st.selectbox(
        "Filter by category",
        options,
        format_func=_filter_label,
    )
    accounts = workspace.ledger.filter_by_category(category)
    st.caption(f"{len(accounts)} accounts shown")
    if accounts:
        st.dataframe(
            _accounts_table(accounts, symbol),
            width="stretch",
            hide_index=True,
        )
    else:
        st.info("No accounts yet.")

    with st.expander("Add account"):
        _render_account_form(workspace)
    with st.expander("Edit account"):
        _render_account_editor(workspace)


def _render_user_invitations(workspace: Workspace) -> None:
    invitations = workspace.directory.user_invitations
    if not invitations:
        return
    st.subheader("Invitations for you")
    for invitation in invitations:
        info_col, accept_col, reject_col = st.columns([3, 1, 1])
        info_col.write(
            f"{invitation.family_name or invitation.family_id} "
            f"({invitation.role.value})"
        )
        if accept_col.button("Accept", key=f"accept_{invitation.id}"):
            _run_action(
                "Accept invitation",
                lambda: workspace.invitations.accept(invitation.id),
            )
        if reject_col.button("Reject", key=f"reject_{invitation.id}"):
            _run_action(
                "Reject invitation",
                lambda: workspace.invitations.reject(invitation.id),
            )


def _render_family_management(workspace: Workspace) -> None:
    """Render members, invitations and role management of a family."""
    directory = workspace.directory
    family = directory.current_family
    role = directory.caller_role
    st.caption(f"Your role: {role.value if role else 'none'}")

    st.dataframe(
        [
            {
                "Email": member.email or member.user_id,
                "Role": member.role.value,
                "Joined": member.joined_at.date().isoformat(),
            }
            for member in directory.members
        ],
        width="stretch",
        hide_index=True,
    )

    others = [
        member
        for member in directory.members
        if member.user_id != workspace.session.user_id
    ]
    if others and role in (FamilyRole.OWNER, FamilyRole.ADMIN):
        by_id = {member.id: member for member in others}
        member_id = st.selectbox(
            "Member",
            list(by_id),
            format_func=lambda key: by_id[key].email or by_id[key].user_id,
        )
        new_role = st.selectbox("Role", [item.value for item in FamilyRole])
        role_col, remove_col = st.columns(2)
        if role_col.button("Change role"):
            _run_action(
                "Change role",
                lambda: directory.update_member_role(member_id, new_role),
            )
        if remove_col.button("Remove member"):
            _run_action(
                "Remove member",
                lambda: directory.remove_member(member_id),
            )

    st.subheader("Pending invitations")
    for invitation in directory.invitations:
        info_col, cancel_col = st.columns([4, 1])
        info_col.write(f"{invitation.invitee_email} ({invitation.role.value})")
        if cancel_col.button("Cancel", key=f"cancel_{invitation.id}"):
            _run_action(
                "Cancel invitation",
                lambda: workspace.invitations.cancel(invitation.id),
            )
    with st.form("invite", clear_on_submit=True):
        email = st.text_input("Invite by email")
        invite_role = st.selectbox(
            "Invite as",
            [FamilyRole.MEMBER.value, FamilyRole.ADMIN.value],
        )
        if st.form_submit_button("Send invitation"):
            _run_action(
                "Invite member",
                lambda: workspace.invitations.invite(email, invite_role),
            )

    with st.expander("Family settings"):
        new_name = st.text_input("Family name", value=family.name)
        if st.button("Rename family"):
            _run_action(
                "Rename family",
                lambda: directory.rename_family(family.id, new_name),
            )
        if st.button("Leave family"):
            _run_action("Leave family", directory.leave_family)
        if role is FamilyRole.OWNER and st.button("Delete family"):
            _run_action(
                "Delete family",
                lambda: directory.delete_family(family.id),
            )


def _render_family(workspace: Workspace) -> None:
    """Render family selection, creation and management."""
    directory = workspace.directory
    _render_user_invitations(workspace)

    st.subheader("Families")
    families = {family.id: family for family in directory.families}
    if families:
        current = directory.current_family
        keys = list(families)
        selected = st.selectbox(
            "Family",
            keys,
            index=keys.index(current.id) if current else 0,
            format_func=lambda key: families[key].name,
        )
        if current is None or current.id != selected:
            _run_action(
                "Select family",
                lambda: directory.select_family(selected),
            )
    with st.form("create_family", clear_on_submit=True):
        name = st.text_input("New family name")
        if st.form_submit_button("Create family"):
            _run_action("Create family", lambda: directory.create_family(name))

    if directory.current_family is not None:
        _render_family_management(workspace)


def _render_sidebar(workspace: Workspace) -> str:
    """Render navigation and workspace maintenance controls."""
    st.sidebar.caption(f"Signed in as {workspace.session.email}")
    page = st.sidebar.selectbox("Page", ["Dashboard", "Accounts", "Family"])
    if st.sidebar.button("Refresh"):
        _run_action("Refresh", workspace.directory.refresh)
    if st.sidebar.button("Load demo data"):
        _run_action("Load demo data", workspace.reset.load_demo_data)
    if st.sidebar.button("Clear all data"):
        _run_action("Clear all data", workspace.reset.clear_all_data)
    if st.sidebar.button("Sign out"):
        get_usage_logger().info(f"Sign out {workspace.session.user_id}")
        del st.session_state[WORKSPACE_KEY]
        st.rerun()
    return page


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Net Worth Dashboard", layout="wide")
    settings = _load_settings()
    workspace = _get_workspace()
    if workspace is None:
        _sign_in(settings)
        return

    st.title("Net Worth Dashboard")
    _show_notice()
    page = _render_sidebar(workspace)
    symbol = settings.currency_symbol
    if page == "Dashboard":
        _render_dashboard(workspace, symbol)
    elif page == "Accounts":
        _render_accounts(workspace, symbol)
    else:
        _render_family(workspace)


if __name__ == "__main__":  # pragma: no cover
    main()
