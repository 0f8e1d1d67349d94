"""Aha! API client for products, releases and features."""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from ..exceptions import APIError, AuthenticationError, NotFoundError, ResponseDecodeError
from ..models.aha import CustomObjectRecord, Feature, Pagination, Product, Release
from ..utils.logging import StructuredLogger
from .aha_fields import FieldAction, resolve_custom_field
from .base import BaseAPIClient


T = TypeVar("T")


@dataclass
class AhaResponse:
    """Decoded Aha response.

    List endpoints wrap their items next to a ``pagination`` object; for those
    ``body`` is the items and ``page_info`` the decoded pagination.
    """
    status_code: int
    body: Any = None
    page_info: Pagination = field(default_factory=Pagination)


def _replace(target: Any, source: Any) -> None:
    """Copy every dataclass field of ``source`` onto ``target``."""
    for item in fields(source):
        setattr(target, item.name, getattr(source, item.name))


class AhaAPIClient(BaseAPIClient):
    """Aha API client.

    Feature writes update the ``Feature`` passed in with what Aha sends back
    (keeping its ``product``) and return it.
    """

    def __init__(self, url: str, token: str, timeout: int = 30, verify_ssl: bool = True):
        """Initialize Aha API client.

        Args:
            url: Account URL, e.g. https://company.aha.io
            token: Aha API key
            timeout: Request timeout in seconds
            verify_ssl: Verify TLS certificates
        """
        self.url = url.rstrip('/')
        self.token = token

        super().__init__(
            base_url=f"{self.url}/api/v1",
            timeout=timeout,
            verify_ssl=verify_ssl
        )

        self.structured_logger = StructuredLogger(__name__)

    def authenticate(self) -> Dict[str, str]:
        """Return Aha authentication headers."""
        if not self.token:
            raise AuthenticationError("Missing Aha token, set AHA_TOKEN or create .ahaToken")

        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/json"
        }

    def test_connection(self) -> bool:
        """Test Aha API connection and authentication."""
        try:
            res = self.aha("GET", "/me")
            user = (res.body or {}).get("user", {})
            self.logger.info(f"Connected to Aha as: {user.get('name')}")
            return True
        except Exception as e:
            self.logger.error(f"Aha connection test failed: {e}")
            return False

    # Transport

    def aha(
        self,
        method: str,
        endpoint: str,
        body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> AhaResponse:
        """Send one request and unwrap paginated bodies."""
        response = self._make_request(method, endpoint, params=params, json_data=body)
        data = self.decode(response)

        result = AhaResponse(status_code=response.status_code, body=data)

        if isinstance(data, dict) and "pagination" in data:
            result.page_info = Pagination.from_dict(data.get("pagination") or {})
            items = [value for key, value in data.items() if key != "pagination"]
            result.body = items[-1] if items else None

        return result

    def get_all(
        self,
        endpoint: str,
        record_cls: Type[T],
        params: Optional[Dict[str, Any]] = None
    ) -> List[T]:
        """GET every page of a list endpoint, decoded as ``record_cls``."""
        params = dict(params or {})
        result: List[T] = []

        while True:
            res = self.aha("GET", endpoint, params=dict(params))
            if res.body is None:
                break
            if not isinstance(res.body, list):
                raise ResponseDecodeError(f"Expected a list from {endpoint}, got {type(res.body).__name__}")

            result.extend(record_cls.from_dict(item) for item in res.body if isinstance(item, dict))

            page = res.page_info
            if page.current_page >= page.total_pages:
                break
            params["page"] = page.current_page + 1

        self.logger.debug(f"Retrieved {len(result)} {record_cls.__name__} records from {endpoint}")
        return result

    def _get_record(self, endpoint: str, key: str) -> Dict[str, Any]:
        res = self.aha("GET", endpoint)
        if not isinstance(res.body, dict) or not isinstance(res.body.get(key), dict):
            raise ResponseDecodeError(f"Expected a {key!r} object from {endpoint}")
        return res.body[key]

    # Products

    def get_products(self) -> List[Product]:
        products = self.get_all("/products", Product, params={"fields": "*"})
        self.logger.info(f"Retrieved {len(products)} Aha products")
        return products

    def get_product(self, product_id: str) -> Product:
        return Product.from_dict(self._get_record(f"/products/{product_id}", "product"))

    # Releases

    def get_releases(self, product: Product) -> List[Release]:
        releases = self.get_all(f"/products/{product.id}/releases", Release, params={"fields": "*"})
        for release in releases:
            release.product = product
        return releases

    def get_release(self, product: Product, release_id: str) -> Release:
        release = Release.from_dict(self._get_record(f"/releases/{release_id}", "release"))
        release.product = product
        return release

    def get_release_by_name(self, product: Product, name: str) -> Optional[Release]:
        """Find a release by name, None if the product has no such release."""
        for release in self.get_releases(product):
            if release.name == name:
                return release
        return None

    def _require_release(self, product: Product, name: str) -> Release:
        release = self.get_release_by_name(product, name)
        if release is None:
            raise NotFoundError(f"Can't find Aha release {name!r}")
        return release

    def create_release(self, product: Product, name: str, date: str) -> Release:
        res = self.aha("POST", f"/products/{product.id}/releases", {
            "release": {"name": name, "release_date": date}
        })
        release_data = (res.body or {}).get("release") if isinstance(res.body, dict) else None
        release = Release.from_dict(release_data or {"name": name, "release_date": date})
        release.product = product
        self.logger.info(f"Created Aha release {name!r} in {product.reference_prefix or product.id}")
        return release

    def create_release_if_needed(self, product: Product, name: str, date: str) -> Release:
        existing = self.get_release_by_name(product, name)
        if existing is not None:
            return existing
        return self.create_release(product, name, date)

    # Features

    def _feature_from(self, data: Dict[str, Any], product: Optional[Product]) -> Feature:
        feature = Feature.from_dict(data)
        feature.product = product
        return feature

    def get_features(self, product: Product) -> List[Feature]:
        features = self.get_all(f"/products/{product.id}/features", Feature, params={"fields": "*"})
        for feature in features:
            feature.product = product
        self.logger.info(f"Retrieved {len(features)} features from {product.reference_prefix or product.id}")
        return features

    def get_features_by_release_name(self, product: Product, name: str) -> List[Feature]:
        release = self._require_release(product, name)
        features = self.get_all(f"/releases/{release.id}/features", Feature, params={"fields": "*"})
        for feature in features:
            feature.product = product
        return features

    def get_feature(self, product: Optional[Product], feature_id: str) -> Feature:
        return self._feature_from(self._get_record(f"/features/{feature_id}", "feature"), product)

    def refresh_feature(self, feature: Feature) -> Feature:
        _replace(feature, self.get_feature(feature.product, feature.id or feature.reference_num))
        return feature

    def create_feature(self, product: Product, title: str, release_name: str, description: str) -> Feature:
        release = self._require_release(product, release_name)

        try:
            res = self.aha("POST", f"/releases/{release.reference_num}/features", {
                "feature": {
                    "name": title,
                    "description": description,
                    "workflow_kind": "new",
                    "workflow_status": {"name": "Under consideration"}
                }
            })
        except APIError as e:
            self.logger.error(f"Error creating Aha feature {title!r}: {e}")
            raise

        if not isinstance(res.body, dict) or not isinstance(res.body.get("feature"), dict):
            raise ResponseDecodeError("Expected a 'feature' object when creating a feature")

        feature = self._feature_from(res.body["feature"], product)
        self.logger.info(f"Created Aha feature {feature.reference_num} in release {release_name!r}")
        return feature

    def delete_feature(self, reference: str) -> bool:
        """Delete a feature by id or reference number. Already gone counts as deleted."""
        try:
            self.aha("DELETE", f"/features/{reference}")
        except APIError as e:
            if e.is_not_found:
                self.logger.info(f"Aha feature {reference} already deleted")
                return True
            self.logger.error(f"Error deleting feature {reference!r}: {e}")
            raise
        return True

    def update_feature(self, feature: Feature, changes: Dict[str, Any]) -> Feature:
        """PUT ``{"feature": changes}`` and refresh ``feature`` from the reply."""
        return self._put_feature(feature, {"feature": changes})

    def _put_feature(self, feature: Feature, payload: Dict[str, Any]) -> Feature:
        res = self.aha("PUT", f"/features/{feature.reference_num}", payload)
        if isinstance(res.body, dict) and isinstance(res.body.get("feature"), dict):
            _replace(feature, self._feature_from(res.body["feature"], feature.product))
        return feature

    def set_feature_release_by_id(self, feature: Feature, release_id: str) -> Feature:
        return self.update_feature(feature, {"release": release_id})

    def set_feature_release_by_name(self, feature: Feature, name: str) -> Feature:
        if feature.product is None:
            raise NotFoundError(f"Feature {feature.reference_num} has no product to find releases in")
        release = self._require_release(feature.product, name)
        return self.set_feature_release_by_id(feature, release.reference_num)

    def set_feature_name(self, feature: Feature, name: str) -> Feature:
        return self.update_feature(feature, {"name": name})

    def set_feature_status(self, feature: Feature, status: str) -> Feature:
        return self.update_feature(feature, {"workflow_status": {"name": status}})

    def set_feature_due_date(self, feature: Feature, date: str) -> Feature:
        return self.update_feature(feature, {"due_date": date})

    def get_git_url(self, feature: Feature) -> str:
        return feature.git_url()

    def set_git_url(self, feature: Feature, url: str) -> Feature:
        return self.update_feature(feature, {"custom_fields": {"ghe_url": url}})

    def add_tag(self, feature: Feature, tag: str) -> Feature:
        if feature.has_tag(tag):
            return feature
        return self.update_feature(feature, {"tags": feature.tags + [tag]})

    def remove_tag(self, feature: Feature, tag: str) -> Feature:
        if not feature.has_tag(tag):
            return feature
        return self.update_feature(feature, {"tags": [t for t in feature.tags if t != tag]})

    # Custom fields

    def custom_field(
        self,
        feature: Feature,
        name: str,
        action: Union[FieldAction, str],
        value: str = ""
    ) -> str:
        """Run a custom field action, writing to Aha when it changes anything.

        Returns the value for GET, ``"true"``/``"false"`` for COMPARE and
        ``""`` for writes.
        """
        outcome = resolve_custom_field(feature, name, action, value)
        if outcome.is_noop:
            return outcome.value

        try:
            self._put_feature(feature, outcome.update)
        except APIError as e:
            self.logger.error(
                f"Error setting feature({feature.reference_num}) field {name!r} "
                f"to {value!r}: {e.status_code}"
            )
            raise

        self.structured_logger.log_field_update(
            feature.reference_num, name, str(getattr(action, "value", action)).upper(), value
        )
        return ""

    def has_custom_field_value(self, feature: Feature, name: str, value: str) -> bool:
        return self.custom_field(feature, name, FieldAction.COMPARE, value) == "true"

    def add_custom_field_value(self, feature: Feature, name: str, value: str) -> Feature:
        self.custom_field(feature, name, FieldAction.SET, value)
        return feature

    def remove_custom_field_value(self, feature: Feature, name: str, value: str = "") -> Feature:
        self.custom_field(feature, name, FieldAction.REMOVE, value)
        return feature

    # Custom objects

    def get_custom_object_record(self, record_id: str) -> CustomObjectRecord:
        return CustomObjectRecord.from_dict(
            self._get_record(f"/custom_object_records/{record_id}", "custom_object_record")
        )
