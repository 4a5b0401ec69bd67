"""Page settings for the reminders views.

Templates and the front-end list/modal scripts read these keys to build
breadcrumbs, the add-reminder modal and the dynamic search/load-more URLs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal
from urllib.parse import urlencode

if TYPE_CHECKING:
    from crm_service.core.i18n import Localizer
    from crm_service.features.reminders.schemas import ReminderFilters

Section = Literal["reminders", "myreminders", "create", "edit"]


def _url(base: str, **params: Any) -> str:
    query = urlencode({key: "" if value is None else value for key, value in params.items()})
    return f"{base}?{query}"


def page_settings(
    section: Section,
    localizer: Localizer,
    *,
    base_url: str,
    filters: ReminderFilters,
    source: str | None = None,
) -> dict[str, Any]:
    """Build the page configuration for one reminders view.

    Args:
        section: "reminders" / "myreminders" for the list variants,
            "create" / "edit" for the modal forms.
        localizer: Localizer for headings and messages.
        base_url: Mount path of the reminders routes (e.g. "/api/v1/reminders").
        filters: Current resource filters, carried into every generated URL.
        source: "ext" when the list is embedded in another page.
    """
    resource = {
        "reminderresource_id": filters.resource_id,
        "reminderresource_type": filters.resource_type,
    }

    page: dict[str, Any] = {
        "crumbs": [localizer("reminders")],
        "crumbs_special_class": "list-pages-crumbs",
        "page": "reminders",
        "no_results_message": localizer("no_results_found"),
        "mainmenu_reminders": "active",
        "sidepanel_id": "sidepanel-filter-reminders",
        "dynamic_search_url": _url(base_url, action="search", **resource),
        "add_button_classes": "add-edit-reminder-button",
        "load_more_button_route": "reminders",
        "source": source or "list",
        "add_modal_title": localizer("add_reminder"),
        "add_modal_create_url": _url(f"{base_url}/create", **resource),
        "add_modal_action_url": _url(base_url, **resource),
        "add_modal_action_ajax_class": "",
        "add_modal_action_ajax_loading_target": "commonModalBody",
        "add_modal_action_method": "POST",
    }

    if section in ("reminders", "myreminders"):
        heading = localizer("my_reminders" if section == "myreminders" else "reminders")
        page["meta_title"] = heading
        page["heading"] = heading
        if source == "ext":
            page["list_page_actions_size"] = "col-lg-12"

    if section == "create":
        page["section"] = "create"

    if section == "edit":
        page["section"] = "edit"
        page["add_modal_title"] = localizer("edit_reminder")
        page["add_modal_action_method"] = "PUT"

    return page
