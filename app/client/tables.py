"""
Student and company grid controllers.

Builds column definitions for the grid widget (field, header, width, pinning,
renderer name), decorates rows with display fields, and wires row actions
into a ConfirmationWorkflow. Which columns and actions appear depends on the
viewer's capability set from app.core.permissions.
"""

from typing import List, Optional

import structlog

from app.client.api import ApiError, PlacementApiClient
from app.client.confirmation import ConfirmAction, ConfirmationWorkflow, Notifier
from app.core.permissions import Permission, has_permission
from app.schemas.schemas import UserRole

logger = structlog.get_logger()

ROLE_LABELS = {
    UserRole.student.value: "Student",
    UserRole.placement_coordinator.value: "PC",
    UserRole.admin.value: "Admin",
}

NOT_PLACED_OPTION = {"value": "np", "label": "Not Placed"}


def generate_column(
    field: Optional[str],
    header_name: str,
    width: int,
    pinned: Optional[str] = None,
    sortable: bool = True,
    resizable: bool = True,
    cell_renderer: Optional[str] = None,
) -> dict:
    return {
        "field": field,
        "header_name": header_name,
        "width": width,
        "pinned": pinned,
        "sortable": sortable,
        "resizable": resizable,
        "cell_renderer": cell_renderer,
    }


def generate_nested_column(header_name: str, children: List[dict]) -> dict:
    return {"header_name": header_name, "children": children}


def format_cutoff(cutoff: Optional[dict]) -> str:
    """'8.0 CGPA' when a CGPA cutoff is set, otherwise '60%'."""
    cutoff = cutoff or {}
    if cutoff.get("cgpa"):
        return f"{cutoff['cgpa']} CGPA"
    if cutoff.get("percentage") is None:
        return ""
    return f"{cutoff['percentage']}%"


def role_label(role: str) -> str:
    return ROLE_LABELS.get(role, role)


def map_company_row(company: dict) -> dict:
    """Company document -> grid row with derived display fields."""
    cutoffs = company.get("cutoffs") or {}
    return {
        **company,
        "id": company["_id"],
        "selected_students": len(company.get("selected_students_roll_no") or []),
        "cutoff_pg": format_cutoff(cutoffs.get("pg")),
        "cutoff_ug": format_cutoff(cutoffs.get("ug")),
        "cutoff_12": format_cutoff(cutoffs.get("twelfth")),
        "cutoff_10": format_cutoff(cutoffs.get("tenth")),
        "ctc_base": (company.get("ctc_breakup") or {}).get("base"),
    }


def map_student_row(student: dict) -> dict:
    return {**student, "id": student["_id"]}


class StudentTable:
    """
    Student grid: lists users and offers verify / delete / role /
    placement actions, each gated through the confirmation workflow.
    """

    def __init__(self, api: PlacementApiClient, viewer: dict, notifier: Notifier):
        self.api = api
        self.viewer = viewer
        self.students: List[dict] = []
        self.companies: List[dict] = []
        self.workflow = ConfirmationWorkflow(
            executors={
                ConfirmAction.verify: self._set_verified,
                ConfirmAction.unverify: self._set_verified,
                ConfirmAction.delete: lambda target, _: self.api.delete_user(target["id"])["message"],
                ConfirmAction.set_role: lambda target, role: self.api.update_user_role(target["id"], role)["message"],
                ConfirmAction.assign_company: (
                    lambda target, company_id: self.api.update_user_company(target["id"], company_id)["message"]
                ),
            },
            notifier=notifier,
            refetch=self.fetch_student_data,
        )

    def _can(self, permission: Permission) -> bool:
        return has_permission(self.viewer.get("role"), permission)

    def _set_verified(self, target: dict, value) -> str:
        return self.api.update_verification_status(target["id"], value)["message"]

    # ---------- data ----------

    def fetch_student_data(self) -> None:
        try:
            students = self.api.get_users()
        except ApiError as e:
            logger.error("client.students_fetch_failed", error=e.message)
            return
        rows = [map_student_row(s) for s in students]
        rows.sort(key=lambda s: s.get("roll_no") or "")
        self.students = rows

    def fetch_companies_data(self) -> None:
        try:
            self.companies = [map_company_row(c) for c in self.api.get_companies()]
        except ApiError as e:
            logger.error("client.companies_fetch_failed", error=e.message)

    def fetch_data(self) -> None:
        self.fetch_student_data()
        self.fetch_companies_data()

    # ---------- row actions ----------

    def handle_verify_click(self, student: dict) -> None:
        action = ConfirmAction.unverify if student.get("is_verified") else ConfirmAction.verify
        self.workflow.request(student, action, not student.get("is_verified"))

    def handle_delete_click(self, student: dict) -> None:
        self.workflow.request(student, ConfirmAction.delete)

    def handle_role_change(self, student: dict, role: str) -> None:
        self.workflow.request(student, ConfirmAction.set_role, role)

    def handle_company_change(self, student: dict, company_id: str) -> None:
        self.workflow.request(student, ConfirmAction.assign_company, company_id)

    # ---------- renderers ----------

    def role_dropdown(self, student: dict) -> dict:
        return {
            "value": student.get("role"),
            "options": [{"value": role, "label": label} for role, label in ROLE_LABELS.items()],
            "disabled": student.get("id") == self.viewer.get("id"),
        }

    def company_dropdown(self, student: dict) -> dict:
        placed_at = student.get("placed_at") or {}
        return {
            "value": placed_at.get("company_id") or NOT_PLACED_OPTION["value"],
            "options": [NOT_PLACED_OPTION] + [{"value": c["id"], "label": c["name"]} for c in self.companies],
        }

    # ---------- columns ----------

    def _academic_columns(self) -> List[dict]:
        def grade(key: str, header: str) -> dict:
            return generate_nested_column(header, [
                generate_column(f"{key}.cgpa", "CGPA", 85, None, True, False, "decimal"),
                generate_column(f"{key}.percentage", "%", 85, None, True, False, "decimal"),
            ])

        return [
            generate_nested_column("Grades", [
                grade("pg", "PG"), grade("ug", "UG"), grade("hsc", "HSC"), grade("ssc", "SSC"),
            ]),
            generate_column("total_gap_in_academics", "Gap", 75),
            generate_column("backlogs", "Backlogs", 85),
        ]

    def column_definitions(self) -> List[dict]:
        columns = []
        if self._can(Permission.delete_users) or self._can(Permission.verify_users):
            actions = []
            if self._can(Permission.delete_users):
                actions.append(generate_column(None, "Delete", 55, "left", False, False, "delete_button"))
            if self._can(Permission.verify_users):
                actions.append(generate_column(None, "Verify", 55, "left", False, False, "verify_button"))
            columns.append(generate_nested_column("Actions", actions))

        role_renderer = "role_dropdown" if self._can(Permission.assign_roles) else "role_label"
        company_renderer = "company_dropdown" if self._can(Permission.assign_placement) else None

        columns += [
            generate_column("role", "Role", 100, "left", False, False, role_renderer),
            generate_column("name", "Name", 130, "left"),
            generate_column("roll_no", "Roll No", 100),
            generate_column("email", "Email", 225),
            generate_nested_column("Placement Details", [
                generate_column("placed_at.company_name", "Company", 275, None, True, True, company_renderer),
                generate_nested_column("CTC (LPA)", [
                    generate_column("placed_at.ctc", "CTC", 80, None, True, False, "decimal"),
                    generate_column("placed_at.ctc_base", "Base", 80, None, True, False, "decimal"),
                ]),
                generate_column("placed_at.location", "Location", 100, None, True, False),
            ]),
        ]
        if self._can(Permission.edit_users):
            columns += self._academic_columns()
        return columns


class CompanyTable:
    """Company grid with delete (confirmed) and add/edit form hooks."""

    def __init__(self, api: PlacementApiClient, viewer: dict, notifier: Notifier):
        self.api = api
        self.viewer = viewer
        self.notifier = notifier
        self.rows: List[dict] = []
        self.workflow = ConfirmationWorkflow(
            executors={ConfirmAction.delete: lambda target, _: self.api.delete_company(target["id"])["message"]},
            notifier=notifier,
            refetch=self.fetch_data,
        )

    @property
    def can_manage(self) -> bool:
        return has_permission(self.viewer.get("role"), Permission.manage_companies)

    def fetch_data(self) -> None:
        try:
            self.rows = [map_company_row(c) for c in self.api.get_companies()]
        except ApiError as e:
            logger.error("client.companies_fetch_failed", error=e.message)

    def handle_delete_click(self, company: dict) -> None:
        self.workflow.request(company, ConfirmAction.delete)

    def submit_form(self, data: dict, company_id: Optional[str] = None) -> bool:
        """Add (no company_id) or update a company from the form, then refetch."""
        try:
            if company_id:
                company = self.api.update_company(company_id, data)
            else:
                company = self.api.add_company(data)
        except ApiError as e:
            self.notifier.error(e.message)
            return False
        verb = "updated" if company_id else "added"
        self.notifier.success(f"Company {company['name']} {verb} successfully")
        self.fetch_data()
        return True

    def column_definitions(self) -> List[dict]:
        columns = []
        if self.can_manage:
            columns.append(generate_nested_column("Actions", [
                generate_column(None, "Delete", 55, "left", False, False, "delete_button"),
                generate_column(None, "Edit", 55, "left", False, False, "edit_button"),
            ]))
        columns += [
            generate_column("name", "Name", 150, "left"),
            generate_column("status", "Status", 100, None, False),
            generate_column("type_of_offer", "Offer", 90),
            generate_column("profile", "Profile", 150),
            generate_column("profile_category", "Category", 100),
            generate_column("interview_shortlist", "Shortlists", 120),
            generate_column("selected_students", "Selects", 100),
            generate_column("date_of_offer", "Offer Date", 125, None, True, False, "date"),
            generate_column("locations", "Locations", 130),
            generate_nested_column("CTC (LPA)", [
                generate_column("ctc", "CTC", 80, None, True, False, "decimal"),
                generate_column("ctc_base", "Base", 80, None, True, False, "decimal"),
            ]),
            generate_nested_column("Cutoffs", [
                generate_column("cutoff_pg", "PG", 80, None, False, False),
                generate_column("cutoff_ug", "UG", 80, None, False, False),
                generate_column("cutoff_12", "12", 80, None, False, False),
                generate_column("cutoff_10", "10", 80, None, False, False),
            ]),
            generate_column("bond", "Bond", 60, None, False, False),
        ]
        return columns
