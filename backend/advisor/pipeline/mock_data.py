"""Static catalog used when ``catalog_mode`` is ``mock``.

Category paths are "/"-joined names from ``MOCK_TAXONOMY`` so category-id
filtering works the same way it does against the live catalog.
"""

from __future__ import annotations

from advisor.models.contracts import ProductRecord, TaxonomyCategory

MOCK_TAXONOMY: list[TaxonomyCategory] = [
    TaxonomyCategory(
        id="3944",
        name="Electronics",
        children=[
            TaxonomyCategory(
                id="3944_3951",
                name="Computers",
                children=[TaxonomyCategory(id="3944_3951_1089430", name="Laptops")],
            ),
            TaxonomyCategory(
                id="3944_542371",
                name="Cell Phones",
                children=[TaxonomyCategory(id="3944_542371_1105910", name="Smartphones")],
            ),
            TaxonomyCategory(
                id="3944_133251",
                name="Audio",
                children=[TaxonomyCategory(id="3944_133251_1095191", name="Headphones")],
            ),
            TaxonomyCategory(
                id="3944_1229875",
                name="Smart Home",
                children=[
                    TaxonomyCategory(id="3944_1229875_1229876", name="Smart Speakers"),
                    TaxonomyCategory(id="3944_1229875_1229877", name="Thermostats"),
                ],
            ),
        ],
    ),
    TaxonomyCategory(
        id="4044",
        name="Home",
        children=[
            TaxonomyCategory(
                id="4044_90548",
                name="Kitchen Appliances",
                children=[TaxonomyCategory(id="4044_90548_90546", name="Coffee Makers")],
            ),
        ],
    ),
]

_LAPTOPS = "Electronics/Computers/Laptops"
_PHONES = "Electronics/Cell Phones/Smartphones"
_HEADPHONES = "Electronics/Audio/Headphones"
_SPEAKERS = "Electronics/Smart Home/Smart Speakers"
_THERMOSTATS = "Electronics/Smart Home/Thermostats"
_COFFEE = "Home/Kitchen Appliances/Coffee Makers"


def _url(product_id: str) -> str:
    return f"https://www.walmart.com/ip/{product_id}"


MOCK_PRODUCTS: list[ProductRecord] = [
    ProductRecord(
        id="mock-laptop-001",
        name="XPS Ultra Gaming Laptop - 16GB RAM, RTX 3070, 1TB SSD",
        brand="XPS",
        sale_price=1299.99,
        original_price=1499.99,
        rating=4.7,
        review_count=852,
        short_description=(
            "Ultimate gaming performance with NVIDIA GeForce RTX 3070 graphics, 16GB RAM "
            "and a 1TB NVMe SSD. The 15.6-inch 144Hz display keeps gameplay smooth."
        ),
        features=[
            "NVIDIA GeForce RTX 3070 8GB Graphics",
            "Intel Core i7-12700H Processor",
            "16GB DDR5 RAM",
            "1TB NVMe SSD",
            "15.6-inch Full HD 144Hz Display",
            "RGB Backlit Keyboard",
        ],
        specifications={
            "Processor": "Intel Core i7-12700H",
            "RAM": "16GB DDR5",
            "Storage": "1TB NVMe SSD",
            "Graphics": "NVIDIA GeForce RTX 3070",
            "Battery Life": "Up to 6 hours",
        },
        category_path=_LAPTOPS,
        product_url=_url("mock-laptop-001"),
        editors_choice=True,
    ),
    ProductRecord(
        id="mock-laptop-002",
        name="ProBook Business Laptop - Intel i5, 8GB RAM, 512GB SSD",
        brand="ProBook",
        sale_price=749.99,
        original_price=849.99,
        rating=4.5,
        review_count=1243,
        short_description=(
            "A reliable business laptop with an Intel Core i5 processor, 8GB RAM and "
            "512GB SSD. All-day battery life for professional use."
        ),
        features=[
            "Intel Core i5-1135G7 Processor",
            "8GB DDR4 RAM",
            "512GB PCIe NVMe SSD",
            "14-inch Full HD IPS Display",
            "Fingerprint Reader",
        ],
        specifications={
            "Processor": "Intel Core i5-1135G7",
            "RAM": "8GB DDR4",
            "Storage": "512GB PCIe NVMe SSD",
            "Battery Life": "Up to 10 hours",
        },
        category_path=_LAPTOPS,
        product_url=_url("mock-laptop-002"),
    ),
    ProductRecord(
        id="mock-laptop-003",
        name="MacBook Air M2 - 8GB RAM, 256GB SSD",
        brand="Apple",
        sale_price=1099.99,
        original_price=1199.99,
        rating=4.8,
        review_count=3567,
        short_description=(
            "The M2 chip in an ultra-thin, fanless design with a Liquid Retina display, "
            "8GB unified memory and 256GB SSD storage."
        ),
        features=[
            "Apple M2 Chip with 8-core CPU and 8-core GPU",
            "8GB Unified Memory",
            "256GB SSD Storage",
            "13.6-inch Liquid Retina Display",
            "Up to 18 hours of battery life",
        ],
        specifications={
            "Processor": "Apple M2 Chip",
            "RAM": "8GB Unified Memory",
            "Storage": "256GB SSD",
            "Operating System": "macOS",
        },
        category_path=_LAPTOPS,
        product_url=_url("mock-laptop-003"),
        best_seller=True,
    ),
    ProductRecord(
        id="mock-laptop-004",
        name="Budget Student Chromebook - Intel Celeron, 4GB RAM, 64GB eMMC",
        brand="Acer",
        sale_price=249.99,
        original_price=299.99,
        rating=4.2,
        review_count=2156,
        short_description=(
            "An affordable Chromebook for students and everyday tasks with an Intel "
            "Celeron processor, 4GB RAM and 64GB eMMC storage."
        ),
        features=[
            "Intel Celeron N4020 Processor",
            "4GB LPDDR4 RAM",
            "64GB eMMC Storage",
            "11.6-inch HD Display",
            "Chrome OS",
        ],
        specifications={
            "Processor": "Intel Celeron N4020",
            "RAM": "4GB LPDDR4",
            "Storage": "64GB eMMC",
            "Operating System": "Chrome OS",
        },
        category_path=_LAPTOPS,
        product_url=_url("mock-laptop-004"),
    ),
    ProductRecord(
        id="mock-phone-001",
        name="Galaxy S23 Ultra - 256GB, 12GB RAM, 108MP Camera",
        brand="Samsung",
        sale_price=1199.99,
        original_price=1299.99,
        rating=4.7,
        review_count=2453,
        short_description=(
            "Professional-grade camera system, S Pen support and a 6.8-inch 120Hz "
            "display on Android."
        ),
        features=[
            "108MP Wide Camera with 10x Telephoto",
            "6.8-inch Dynamic AMOLED 2X Display with 120Hz",
            "12GB RAM, 256GB Storage",
            "5G connectivity",
            "Android 13",
        ],
        specifications={"Storage": "256GB", "RAM": "12GB", "Operating System": "Android 13"},
        category_path=_PHONES,
        product_url=_url("mock-phone-001"),
        editors_choice=True,
    ),
    ProductRecord(
        id="mock-phone-002",
        name="iPhone 14 Pro - 128GB, A16 Bionic",
        brand="Apple",
        sale_price=999.99,
        original_price=999.99,
        rating=4.8,
        review_count=5432,
        short_description="Dynamic Island, a 48MP main camera, Always-On display and the A16 Bionic chip.",
        features=[
            "6.1-inch Super Retina XDR display",
            "48MP Main camera",
            "A16 Bionic chip",
            "5G connectivity",
            "iOS 16",
        ],
        specifications={"Storage": "128GB", "Operating System": "iOS 16"},
        category_path=_PHONES,
        product_url=_url("mock-phone-002"),
        best_seller=True,
    ),
    ProductRecord(
        id="mock-phone-003",
        name="Budget Android Phone - 128GB, 48MP Camera",
        brand="Motorola",
        sale_price=299.99,
        original_price=349.99,
        rating=4.3,
        review_count=3241,
        short_description="A budget-friendly Android phone with a 48MP camera and a large battery.",
        features=[
            "6.5-inch LCD Display",
            "48MP Main Camera",
            "4GB RAM, 128GB Storage (Expandable)",
            "5000mAh Battery with Fast Charging",
            "Android 12",
        ],
        specifications={"Storage": "128GB", "RAM": "4GB", "Operating System": "Android 12"},
        category_path=_PHONES,
        product_url=_url("mock-phone-003"),
    ),
    ProductRecord(
        id="mock-audio-001",
        name="Sony WH-1000XM5 Wireless Noise Cancelling Headphones",
        brand="Sony",
        sale_price=349.99,
        original_price=399.99,
        rating=4.7,
        review_count=6120,
        short_description="Industry-leading noise cancellation with 30-hour battery life over Bluetooth.",
        features=[
            "Active noise cancelling",
            "Bluetooth 5.2 wireless",
            "30-hour battery life",
            "Multipoint connection",
        ],
        specifications={"Connectivity": "Bluetooth", "Battery": "30 hours"},
        category_path=_HEADPHONES,
        product_url=_url("mock-audio-001"),
        editors_choice=True,
    ),
    ProductRecord(
        id="mock-audio-002",
        name="Soundcore Life Q20 Hybrid Wireless Headphones",
        brand="Soundcore",
        sale_price=59.99,
        original_price=79.99,
        rating=4.4,
        review_count=15230,
        short_description="Hybrid active noise cancelling Bluetooth headphones with 40-hour playtime.",
        features=[
            "Hybrid active noise cancelling",
            "Bluetooth wireless",
            "40-hour playtime",
            "Memory foam ear cups",
        ],
        specifications={"Connectivity": "Bluetooth", "Battery": "40 hours"},
        category_path=_HEADPHONES,
        product_url=_url("mock-audio-002"),
        best_seller=True,
    ),
    ProductRecord(
        id="mock-audio-003",
        name="Studio Monitor Wired Headphones",
        brand="Audio-Technica",
        sale_price=149.0,
        original_price=169.0,
        rating=4.6,
        review_count=4310,
        short_description="Closed-back wired studio headphones with a detachable cable.",
        features=["45mm large-aperture drivers", "Detachable cable", "Wired 3.5mm"],
        specifications={"Connectivity": "Wired"},
        category_path=_HEADPHONES,
        product_url=_url("mock-audio-003"),
    ),
    ProductRecord(
        id="mock-home-001",
        name="Smart Speaker with Voice Assistant",
        brand="Echo",
        sale_price=99.99,
        original_price=129.99,
        rating=4.6,
        review_count=7821,
        short_description="Control your smart home, play music and get answers with voice recognition.",
        features=[
            "Built-in voice assistant",
            "Room-filling sound with powerful bass",
            "Multi-room audio capability",
        ],
        specifications={"Connectivity": "WiFi, Bluetooth"},
        category_path=_SPEAKERS,
        product_url=_url("mock-home-001"),
        editors_choice=True,
    ),
    ProductRecord(
        id="mock-home-002",
        name="Smart Thermostat with Energy Saving Features",
        brand="Nest",
        sale_price=249.99,
        original_price=279.99,
        rating=4.7,
        review_count=5291,
        short_description="An intelligent thermostat that learns your schedule and preferences.",
        features=[
            "Learns your temperature preferences",
            "Remote control through smartphone app",
            "Works with multiple voice assistants",
        ],
        specifications={"Connectivity": "WiFi, Bluetooth"},
        category_path=_THERMOSTATS,
        product_url=_url("mock-home-002"),
    ),
    ProductRecord(
        id="mock-coffee-001",
        name="Premium Espresso Machine with Milk Frother",
        brand="Breville",
        sale_price=649.99,
        original_price=799.99,
        rating=4.6,
        review_count=3241,
        short_description=(
            "Cafe-quality espresso at home with a built-in grinder, 15-bar pressure and an "
            "automatic milk frother."
        ),
        features=[
            "Built-in conical burr grinder",
            "15-bar Italian pump",
            "Automatic milk frothing system",
            "Programmable settings",
        ],
        specifications={"Water Tank": "2.0L removable", "Pressure": "15-bar"},
        category_path=_COFFEE,
        product_url=_url("mock-coffee-001"),
        best_seller=True,
    ),
    ProductRecord(
        id="mock-coffee-002",
        name="Drip Coffee Maker with Thermal Carafe, 10-cup",
        brand="OXO",
        sale_price=149.99,
        original_price=179.99,
        rating=4.5,
        review_count=4682,
        short_description="A programmable drip coffee maker with a double-walled thermal carafe.",
        features=[
            "10-cup thermal carafe",
            "Programmable 24-hour timer",
            "Adjustable brew strength control",
        ],
        specifications={"Capacity": "10 cups"},
        category_path=_COFFEE,
        product_url=_url("mock-coffee-002"),
        editors_choice=True,
    ),
    ProductRecord(
        id="mock-coffee-003",
        name="Single Serve K-Cup Coffee Maker",
        brand="Keurig",
        sale_price=79.99,
        original_price=99.99,
        rating=4.3,
        review_count=9824,
        short_description="Compact K-cup compatible coffee maker with multiple brew sizes.",
        features=[
            "Compatible with K-Cup pods or ground coffee",
            "Multiple brew sizes: 6, 8, 10, or 12 oz",
            "One-minute brew time",
        ],
        specifications={"Capacity": "Single serve"},
        category_path=_COFFEE,
        product_url=_url("mock-coffee-003"),
    ),
]
