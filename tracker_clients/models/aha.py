"""Aha! record models.

See https://www.aha.io/api for the payloads these mirror.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import CustomFieldError
from .common import text, integer, boolean, optional, many, strings


logger = logging.getLogger(__name__)


@dataclass
class Pagination:
    """Page info attached to Aha list responses."""
    total_records: int = 0
    total_pages: int = 0
    current_page: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Pagination':
        return cls(
            total_records=integer(data, "total_records"),
            total_pages=integer(data, "total_pages"),
            current_page=integer(data, "current_page")
        )


@dataclass
class User:
    """Aha user."""
    id: str = ""
    name: str = ""
    email: str = ""
    created_at: str = ""
    updated_at: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(
            id=text(data, "id"),
            name=text(data, "name"),
            email=text(data, "email"),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at"),
            raw=data
        )


@dataclass
class FieldOption:
    id: str = ""
    label: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FieldOption':
        return cls(id=text(data, "id"), label=text(data, "label"))


@dataclass
class CustomFieldDefinition:
    """Definition of a custom field on a product screen."""
    id: str = ""
    key: str = ""
    name: str = ""
    type: str = ""
    api_type: str = ""
    position: int = 0
    required: bool = False
    options: List[FieldOption] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CustomFieldDefinition':
        return cls(
            id=text(data, "id"),
            key=text(data, "key"),
            name=text(data, "name"),
            type=text(data, "type"),
            api_type=text(data, "api_type"),
            position=integer(data, "position"),
            required=boolean(data, "required"),
            options=many(FieldOption.from_dict, data.get("options"))
        )


@dataclass
class ScreenDefinition:
    id: str = ""
    screenable_type: str = ""
    name: str = ""
    custom_field_definitions: List[CustomFieldDefinition] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScreenDefinition':
        return cls(
            id=text(data, "id"),
            screenable_type=text(data, "screenable_type"),
            name=text(data, "name"),
            custom_field_definitions=many(
                CustomFieldDefinition.from_dict, data.get("custom_field_definitions")
            )
        )


@dataclass
class Product:
    """Aha product (a.k.a. workspace)."""
    id: str = ""
    reference_prefix: str = ""
    name: str = ""
    product_line: bool = False
    created_at: str = ""
    updated_at: str = ""
    url: str = ""
    resource: str = ""
    screen_definitions: List[ScreenDefinition] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        return cls(
            id=text(data, "id"),
            reference_prefix=text(data, "reference_prefix"),
            name=text(data, "name"),
            product_line=boolean(data, "product_line"),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at"),
            url=text(data, "url"),
            resource=text(data, "resource"),
            screen_definitions=many(ScreenDefinition.from_dict, data.get("screen_definitions")),
            raw=data
        )

    def feature_field_definitions(self) -> List[CustomFieldDefinition]:
        """Custom field definitions from the screens that apply to features."""
        result = []
        for screen in self.screen_definitions:
            if screen.screenable_type != "Feature":
                continue
            result.extend(screen.custom_field_definitions)
        return result


@dataclass
class Attachment:
    id: str = ""
    download_url: str = ""
    created_at: str = ""
    updated_at: str = ""
    content_type: str = ""
    file_name: str = ""
    file_size: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Attachment':
        return cls(
            id=text(data, "id"),
            download_url=text(data, "download_url"),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at"),
            content_type=text(data, "content_type"),
            file_name=text(data, "file_name"),
            file_size=integer(data, "file_size")
        )


@dataclass
class Description:
    id: str = ""
    body: str = ""
    created_at: str = ""
    attachments: List[Attachment] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Description':
        return cls(
            id=text(data, "id"),
            body=text(data, "body"),
            created_at=text(data, "created_at"),
            attachments=many(Attachment.from_dict, data.get("attachments"))
        )


@dataclass
class IntegrationField:
    id: str = ""
    name: str = ""
    value: str = ""
    integration_id: str = ""
    service_name: str = ""
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IntegrationField':
        return cls(
            id=text(data, "id"),
            name=text(data, "name"),
            value=text(data, "value"),
            integration_id=text(data, "integration_id"),
            service_name=text(data, "service_name"),
            created_at=text(data, "created_at")
        )


@dataclass
class CustomField:
    """A custom field value as it appears on a record.

    ``value`` is left as decoded: a string for scalar fields, a list for
    multi-select fields, or None.
    """
    key: str = ""
    name: str = ""
    value: Any = None
    type: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CustomField':
        return cls(
            key=text(data, "key"),
            name=text(data, "name"),
            value=data.get("value"),
            type=text(data, "type")
        )


@dataclass
class CustomObjectLink:
    key: str = ""
    name: str = ""
    record_type: str = ""
    record_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CustomObjectLink':
        return cls(
            key=text(data, "key"),
            name=text(data, "name"),
            record_type=text(data, "record_type"),
            record_ids=strings(data.get("record_ids"))
        )


@dataclass
class WorkflowStatus:
    id: str = ""
    name: str = ""
    position: int = 0
    complete: bool = False
    color: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WorkflowStatus':
        return cls(
            id=text(data, "id"),
            name=text(data, "name"),
            position=integer(data, "position"),
            complete=boolean(data, "complete"),
            color=text(data, "color")
        )


@dataclass
class Release:
    """Aha release."""
    id: str = ""
    reference_num: str = ""
    name: str = ""
    start_date: str = ""
    release_date: str = ""
    parking_lot: bool = False
    created_at: str = ""
    product_id: str = ""
    url: str = ""
    resource: str = ""
    owner: Optional[User] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)
    product: Optional[Product] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Release':
        return cls(
            id=text(data, "id"),
            reference_num=text(data, "reference_num"),
            name=text(data, "name"),
            start_date=text(data, "start_date"),
            release_date=text(data, "release_date"),
            parking_lot=boolean(data, "parking_lot"),
            created_at=text(data, "created_at"),
            product_id=text(data, "product_id"),
            url=text(data, "url"),
            resource=text(data, "resource"),
            owner=optional(User.from_dict, data.get("owner")),
            raw=data
        )


@dataclass
class ReleasePhase:
    id: str = ""
    name: str = ""
    start_on: str = ""
    end_on: str = ""
    type: str = ""
    release_id: str = ""
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReleasePhase':
        return cls(
            id=text(data, "id"),
            name=text(data, "name"),
            start_on=text(data, "start_on"),
            end_on=text(data, "end_on"),
            type=text(data, "type"),
            release_id=text(data, "release_id"),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at")
        )


@dataclass
class Requirement:
    id: str = ""
    name: str = ""
    reference_num: str = ""
    position: int = 0
    release_id: str = ""
    url: str = ""
    workflow_status: Optional[WorkflowStatus] = None
    assigned_to_user: Optional[User] = None
    custom_fields: List[CustomField] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Requirement':
        return cls(
            id=text(data, "id"),
            name=text(data, "name"),
            reference_num=text(data, "reference_num"),
            position=integer(data, "position"),
            release_id=text(data, "release_id"),
            url=text(data, "url"),
            workflow_status=optional(WorkflowStatus.from_dict, data.get("workflow_status")),
            assigned_to_user=optional(User.from_dict, data.get("assigned_to_user")),
            custom_fields=many(CustomField.from_dict, data.get("custom_fields"))
        )


@dataclass
class Feature:
    """Aha feature.

    ``product`` is not part of the payload; the client attaches the product the
    feature was read through so custom-field definitions can be resolved.
    """
    id: str = ""
    name: str = ""
    reference_num: str = ""
    position: int = 0
    score: int = 0
    created_at: str = ""
    updated_at: str = ""
    start_date: str = ""
    due_date: str = ""
    product_id: str = ""
    progress_source: str = ""
    workflow_kind: str = ""
    workflow_status: Optional[WorkflowStatus] = None
    description: Optional[Description] = None
    attachments: List[Attachment] = field(default_factory=list)
    integration_fields: List[IntegrationField] = field(default_factory=list)
    url: str = ""
    resource: str = ""
    release: Optional[Release] = None
    release_phase: Optional[ReleasePhase] = None
    created_by_user: Optional[User] = None
    assigned_to_user: Optional[User] = None
    requirements: List[Requirement] = field(default_factory=list)
    comment_count: int = 0
    tags: List[str] = field(default_factory=list)
    custom_fields: List[CustomField] = field(default_factory=list)
    custom_object_links: List[CustomObjectLink] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)
    product: Optional[Product] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Feature':
        workflow_kind = data.get("workflow_kind")
        if isinstance(workflow_kind, dict):
            workflow_kind = workflow_kind.get("name")

        return cls(
            id=text(data, "id"),
            name=text(data, "name"),
            reference_num=text(data, "reference_num"),
            position=integer(data, "position"),
            score=integer(data, "score"),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at"),
            start_date=text(data, "start_date"),
            due_date=text(data, "due_date"),
            product_id=text(data, "product_id"),
            progress_source=text(data, "progress_source"),
            workflow_kind=workflow_kind or "",
            workflow_status=optional(WorkflowStatus.from_dict, data.get("workflow_status")),
            description=optional(Description.from_dict, data.get("description")),
            attachments=many(Attachment.from_dict, data.get("attachments")),
            integration_fields=many(IntegrationField.from_dict, data.get("integration_fields")),
            url=text(data, "url"),
            resource=text(data, "resource"),
            release=optional(Release.from_dict, data.get("release")),
            release_phase=optional(ReleasePhase.from_dict, data.get("belongs_to_release_phase")),
            created_by_user=optional(User.from_dict, data.get("created_by_user")),
            assigned_to_user=optional(User.from_dict, data.get("assigned_to_user")),
            requirements=many(Requirement.from_dict, data.get("requirements")),
            comment_count=integer(data, "comment_count"),
            tags=strings(data.get("tags")),
            custom_fields=many(CustomField.from_dict, data.get("custom_fields")),
            custom_object_links=many(CustomObjectLink.from_dict, data.get("custom_object_links")),
            raw=data
        )

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def find_custom_field(self, key: str) -> Optional[CustomField]:
        for custom_field in self.custom_fields:
            if custom_field.key == key:
                return custom_field
        return None

    def find_object_link(self, key: str) -> Optional[CustomObjectLink]:
        for link in self.custom_object_links:
            if link.key == key:
                return link
        return None

    def get_custom_field(self, name: str) -> Tuple[str, bool]:
        """Read a scalar custom field by display name.

        Returns ``(value, found)``. Only url, string and note fields are
        readable this way; anything else is reported as not found.
        """
        for custom_field in self.custom_fields:
            if custom_field.name != name:
                continue
            if custom_field.type in ("url", "string"):
                return (custom_field.value or "", True)
            if custom_field.type == "note":
                return ((custom_field.value or "").strip(), True)
            logger.warning(f"Unknown custom field type {custom_field.type!r} for {name!r}")
            break
        return ("", False)

    def git_url(self) -> str:
        """Value of the ``ghe_url`` custom field, ``""`` if not set."""
        custom_field = self.find_custom_field("ghe_url")
        if custom_field is None or custom_field.type != "url":
            return ""
        if custom_field.value is None:
            return ""
        if not isinstance(custom_field.value, str):
            raise CustomFieldError(
                f"ghe_url on {self.reference_num} isn't a url: {custom_field.value!r}"
            )
        return custom_field.value


@dataclass
class CustomObjectRecord:
    id: str = ""
    product_id: str = ""
    key: str = ""
    created_at: str = ""
    updated_at: str = ""
    custom_fields: List[CustomField] = field(default_factory=list)
    custom_object_links: List[CustomObjectLink] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CustomObjectRecord':
        return cls(
            id=text(data, "id"),
            product_id=text(data, "product_id"),
            key=text(data, "key"),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at"),
            custom_fields=many(CustomField.from_dict, data.get("custom_fields")),
            custom_object_links=many(CustomObjectLink.from_dict, data.get("custom_object_links")),
            raw=data
        )


@dataclass
class Integration:
    id: str = ""
    service_name: str = ""
    name: str = ""
    enabled: bool = False
    callback_token: str = ""
    created_at: str = ""
    updated_at: str = ""
    url: str = ""
    resource: str = ""
    owner: Optional[User] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Integration':
        return cls(
            id=text(data, "id"),
            service_name=text(data, "service_name"),
            name=text(data, "name"),
            enabled=boolean(data, "enabled"),
            callback_token=text(data, "callback_token"),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at"),
            url=text(data, "url"),
            resource=text(data, "resource"),
            owner=optional(User.from_dict, data.get("owner"))
        )


@dataclass
class Project:
    id: str = ""
    reference_prefix: str = ""
    name: str = ""
    product_line: bool = False
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        return cls(
            id=text(data, "id"),
            reference_prefix=text(data, "reference_prefix"),
            name=text(data, "name"),
            product_line=boolean(data, "product_line"),
            created_at=text(data, "created_at")
        )


@dataclass
class AuditChange:
    field_name: str = ""
    value: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuditChange':
        return cls(field_name=text(data, "field_name"), value=data.get("value"))


@dataclass
class Audit:
    """The audit record carried by an Aha activity webhook."""
    id: str = ""
    audit_action: str = ""
    created_at: str = ""
    interesting: bool = False
    user: Optional[User] = None
    contributors: List[User] = field(default_factory=list)
    auditable_type: str = ""
    auditable_id: str = ""
    associated_type: str = ""
    associated_id: str = ""
    description: str = ""
    auditable_url: str = ""
    changes: List[AuditChange] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Audit':
        contributors = []
        for contributor in data.get("contributors") or []:
            if isinstance(contributor, dict) and isinstance(contributor.get("user"), dict):
                contributors.append(User.from_dict(contributor["user"]))

        return cls(
            id=text(data, "id"),
            audit_action=text(data, "audit_action"),
            created_at=text(data, "created_at"),
            interesting=boolean(data, "interesting"),
            user=optional(User.from_dict, data.get("user")),
            contributors=contributors,
            auditable_type=text(data, "auditable_type"),
            auditable_id=text(data, "auditable_id"),
            associated_type=text(data, "associated_type"),
            associated_id=text(data, "associated_id"),
            description=text(data, "description"),
            auditable_url=text(data, "auditable_url"),
            changes=many(AuditChange.from_dict, data.get("changes"))
        )


@dataclass
class AhaEvent:
    """Aha activity webhook payload."""
    event: str = ""
    audit: Optional[Audit] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AhaEvent':
        return cls(
            event=text(data, "event"),
            audit=optional(Audit.from_dict, data.get("audit")),
            raw=data
        )
