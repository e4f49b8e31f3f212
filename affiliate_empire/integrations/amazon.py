"""
Amazon Product Advertising API (PA-API 5) product search.

Requests are SigV4-signed with botocore. Without credentials the mock client
serves a fixed sample catalogue so the rest of the pipeline can run.
"""

import json
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple

from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials
from loguru import logger

from affiliate_empire.config import Config

from .base import MockClient, ProviderProfile, RealClient, SecretRef
from .errors import AmazonError
from .http import request_json
from .pricing import CostEstimate

PAAPI_HOST = "webservices.amazon.com"
PAAPI_PATH = "/paapi5/searchitems"
PAAPI_TARGET = "com.amazon.paapi5.v1.ProductAdvertisingAPIv1.SearchItems"
PAAPI_RESOURCES = [
    "ItemInfo.Title",
    "ItemInfo.ByLineInfo",
    "ItemInfo.Classifications",
    "ItemInfo.Features",
    "Offers.Listings.Price",
    "Images.Primary.Large",
]
MAX_ITEM_COUNT = 10


@dataclass(frozen=True)
class ProductSearchRequest:
    keywords: str = "trending"
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    limit: int = 10


@dataclass(frozen=True)
class AmazonProduct:
    asin: str
    title: str
    price: float
    affiliate_url: str
    description: Optional[str] = None
    commission: Optional[float] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def affiliate_url(asin: str, partner_tag: str) -> str:
    return f"https://www.amazon.com/dp/{asin}?tag={partner_tag}"


def _display(node: Dict[str, Any], *path: str) -> Optional[Any]:
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


class AmazonClient(RealClient):
    """Live PA-API SearchItems."""

    service_name = "amazon"
    error_class = AmazonError

    def __init__(self, credentials: Dict[str, str], config: Optional[Config] = None, **kwargs):
        super().__init__(credentials, config, **kwargs)
        self.partner_tag = self._credentials["amazon-partner-tag"]
        self.region = self.config.get("AMAZON_REGION", "us-east-1")
        self.host = self.config.get("AMAZON_PAAPI_HOST", PAAPI_HOST)

    def generate_affiliate_url(self, asin: str) -> str:
        return affiliate_url(asin, self.partner_tag)

    def _payload(self, request: ProductSearchRequest) -> Dict[str, Any]:
        payload = {
            "Keywords": request.keywords,
            "SearchIndex": request.category or "All",
            "ItemCount": max(1, min(request.limit, MAX_ITEM_COUNT)),
            "PartnerTag": self.partner_tag,
            "PartnerType": "Associates",
            "Marketplace": "www.amazon.com",
            "Resources": PAAPI_RESOURCES,
        }
        # PA-API prices are in the lowest currency unit
        if request.min_price is not None:
            payload["MinPrice"] = int(request.min_price * 100)
        if request.max_price is not None:
            payload["MaxPrice"] = int(request.max_price * 100)
        return payload

    def _signed_headers(self, url: str, body: str) -> Dict[str, str]:
        aws_request = AWSRequest(
            method="POST",
            url=url,
            data=body,
            headers={
                "host": self.host,
                "content-encoding": "amz-1.0",
                "content-type": "application/json; charset=utf-8",
                "x-amz-target": PAAPI_TARGET,
            },
        )
        credentials = Credentials(
            self._credentials["amazon-access-key"],
            self._credentials["amazon-secret-key"],
        )
        SigV4Auth(credentials, "ProductAdvertisingAPI", self.region).add_auth(aws_request)
        return dict(aws_request.headers.items())

    async def _call(self, request: ProductSearchRequest) -> Any:
        logger.info(f"[amazon] Searching products: {request.keywords}")
        url = f"https://{self.host}{PAAPI_PATH}"
        body = json.dumps(self._payload(request))
        return await request_json("POST", url, headers=self._signed_headers(url, body), data=body)

    def _parse(self, raw: Dict[str, Any], request: ProductSearchRequest) -> Tuple[List[AmazonProduct], CostEstimate]:
        items = _display(raw, "SearchResult", "Items") or []
        products = []
        for item in items[:request.limit]:
            asin = item.get("ASIN")
            if not asin:
                continue
            listings = _display(item, "Offers", "Listings") or [{}]
            features = _display(item, "ItemInfo", "Features", "DisplayValues") or []
            products.append(AmazonProduct(
                asin=asin,
                title=_display(item, "ItemInfo", "Title", "DisplayValue") or asin,
                price=float(_display(listings[0], "Price", "Amount") or 0.0),
                affiliate_url=item.get("DetailPageURL") or self.generate_affiliate_url(asin),
                description=features[0] if features else None,
                image_url=_display(item, "Images", "Primary", "Large", "URL"),
                category=_display(item, "ItemInfo", "Classifications", "ProductGroup", "DisplayValue"),
                brand=_display(item, "ItemInfo", "ByLineInfo", "Brand", "DisplayValue"),
            ))
        logger.info(f"[amazon] Found {len(products)} product(s)")
        return products, CostEstimate.zero("requests")


# (asin, title, description, price, commission %, image, category, brand)
SAMPLE_CATALOGUE = (
    ("B08N5WRWNW", "Apple AirPods Pro (2nd Generation)",
     "Active Noise Cancelling, Adaptive Transparency, Personalized Spatial Audio",
     249.0, 4.0, "https://m.media-amazon.com/images/I/61SUj2aKoEL._AC_SL1500_.jpg", "Electronics", "Apple"),
    ("B0B3PSRHHN", "Ninja BN701 Professional Plus Blender",
     "1400 Peak Watts, Auto-iQ, 72 oz Pitcher, 24 oz Smoothie Bowl",
     129.99, 8.0, "https://m.media-amazon.com/images/I/71Kn7XqP8xL._AC_SL1500_.jpg", "Home & Kitchen", "Ninja"),
    ("B09B8RXYM8", "Anker Portable Charger, 20,000mAh Power Bank",
     "USB-C Fast Charging, PowerIQ Technology, for iPhone, Samsung",
     49.99, 6.0, "https://m.media-amazon.com/images/I/61gZC-1HKML._AC_SL1500_.jpg", "Electronics", "Anker"),
    ("B0BSHF7WHW", "LANEIGE Lip Sleeping Mask - Berry",
     "Overnight Lip Treatment, Moisturizes & Nourishes, 20g",
     24.0, 10.0, "https://m.media-amazon.com/images/I/71k5YAKkBVL._SL1500_.jpg", "Beauty", "LANEIGE"),
    ("B0CX23V2ZK", "Stanley Quencher H2.0 FlowState Tumbler 40oz",
     "Vacuum Insulated Stainless Steel, Reusable Straw",
     45.0, 7.0, "https://m.media-amazon.com/images/I/71S4cZj7EyL._AC_SL1500_.jpg", "Sports", "Stanley"),
    ("B09V3KXJPB", "Logitech MX Master 3S Wireless Mouse",
     "Quiet Clicks, 8K DPI, USB-C Charging, Bluetooth, Multi-Device",
     99.99, 5.0, "https://m.media-amazon.com/images/I/61ni3t1ryQL._AC_SL1500_.jpg", "Electronics", "Logitech"),
    ("B0CRX2D7KR", "Molekule Air Mini+ Air Purifier",
     "PECO Technology, Smart Particle Sensor, App Control",
     499.99, 6.0, "https://m.media-amazon.com/images/I/51sXN8H-eeL._AC_SL1200_.jpg", "Home & Kitchen", "Molekule"),
    ("B0B2X2FX9J", "Therabody TheraGun Prime Massage Gun",
     "Percussive Therapy Device, 16mm Amplitude, 5 Speeds",
     299.0, 8.0, "https://m.media-amazon.com/images/I/51EKLh7UYAL._AC_SL1500_.jpg", "Health & Fitness", "Therabody"),
)


class MockAmazonClient(MockClient):
    service_name = "amazon"
    cost_unit = "requests"

    def __init__(self, config: Optional[Config] = None):
        super().__init__(config)
        self.partner_tag = self.config.get("AMAZON_PARTNER_TAG", "mock-20")

    def _mock_payload(self, request: ProductSearchRequest) -> List[AmazonProduct]:
        return [
            AmazonProduct(
                asin=asin,
                title=title,
                description=description,
                price=price,
                commission=commission,
                affiliate_url=affiliate_url(asin, self.partner_tag),
                image_url=image,
                category=category,
                brand=brand,
            )
            for asin, title, description, price, commission, image, category, brand in SAMPLE_CATALOGUE
        ][:request.limit]


AMAZON_PROVIDER = ProviderProfile(
    service_name="amazon",
    secrets=(
        SecretRef("amazon-access-key", "AMAZON_ACCESS_KEY"),
        SecretRef("amazon-secret-key", "AMAZON_SECRET_KEY"),
        SecretRef("amazon-partner-tag", "AMAZON_PARTNER_TAG"),
    ),
    mock_flag="AMAZON_MOCK_MODE",
    real_factory=lambda creds, config: AmazonClient(creds, config),
    mock_factory=lambda config: MockAmazonClient(config),
)
