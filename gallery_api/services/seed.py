"""
Sample content for a fresh installation.
Inserted once, only when the gallery is empty.
"""
from typing import Any, Dict, List
import logging

from gallery_api.services.storage import GalleryStorage

logger = logging.getLogger(__name__)

HEIGHTS = ["h-56", "h-64", "h-72", "h-80"]
SAMPLE_VIDEO = "https://sample-videos.com/zip/10/mp4/SampleVideo_640x360_1mb.mp4"
SAMPLE_COUNT = 80


def _unsplash(photo: str, height: int) -> str:
    return (
        f"https://images.unsplash.com/photo-{photo}"
        f"?ixlib=rb-4.0.3&auto=format&fit=crop&w=500&h={height}"
    )


FEATURED_ITEMS: List[Dict[str, Any]] = [
    {
        "title": "Urban Landscape",
        "category": "photography",
        "image": _unsplash("1449824913935-59a10b8d2000", 600),
        "description": "Modern city life seen through dramatic architectural perspectives and urban lighting",
        "height": "h-64",
        "featured": True,
        "tags": ["urban", "architecture", "cityscape"],
    },
    {
        "title": "Portrait Series",
        "category": "photography",
        "image": _unsplash("1506905925346-21bda4d32df4", 700),
        "description": "Intimate portraits exploring emotion and expression through composition and light",
        "height": "h-80",
        "featured": False,
        "tags": ["portrait", "emotion", "studio"],
    },
    {
        "title": "Nature's Symphony",
        "category": "photography",
        "image": _unsplash("1506905925346-21bda4d32df4", 500),
        "description": "Landscapes showing the raw beauty and power of the natural world",
        "height": "h-56",
        "featured": True,
        "tags": ["nature", "landscape", "outdoor"],
    },
    {
        "title": "Street Photography",
        "category": "photography",
        "image": _unsplash("1558618666-fcd25c85cd64", 650),
        "description": "Candid moments of urban life caught on the street",
        "height": "h-72",
        "featured": False,
        "tags": ["street", "candid", "urban"],
    },
    {
        "title": "Wildlife Photography",
        "category": "photography",
        "image": _unsplash("1583212292454-1fe6229603b7", 700),
        "description": "Glimpses into the world of wildlife and animal behavior",
        "height": "h-80",
        "featured": True,
        "tags": ["wildlife", "animals", "nature"],
    },
    {
        "title": "Night Photography",
        "category": "photography",
        "image": _unsplash("1519904981063-b0cf448d479e", 700),
        "description": "The nocturnal world after the lights come on",
        "height": "h-80",
        "featured": True,
        "tags": ["night", "low-light", "atmospheric"],
    },
    {
        "title": "Contemporary Sculpture",
        "category": "art",
        "image": _unsplash("1578662996442-48f60103fc96", 600),
        "description": "Sculptural works exploring form, space and material",
        "height": "h-64",
        "featured": True,
        "tags": ["sculpture", "modern", "3d"],
    },
    {
        "title": "Digital Paintings",
        "category": "art",
        "image": _unsplash("1541961017774-22349e4a1262", 650),
        "description": "Traditional painting techniques carried into digital media",
        "height": "h-72",
        "featured": False,
        "tags": ["digital", "painting", "technology"],
    },
    {
        "title": "Installation Art",
        "category": "art",
        "image": _unsplash("1578321272176-b7bbc0679853", 700),
        "description": "Large-scale installations built as immersive experiences",
        "height": "h-80",
        "featured": True,
        "tags": ["installation", "immersive", "large-scale"],
    },
    {
        "title": "Minimalist Design",
        "category": "design",
        "image": _unsplash("1487958449943-2429e8be8625", 500),
        "description": "Clean design solutions built on simplicity and function",
        "height": "h-56",
        "featured": True,
        "tags": ["minimalist", "clean", "functional"],
    },
    {
        "title": "Typography Art",
        "category": "design",
        "image": _unsplash("1558618666-fcd25c85cd64", 650),
        "description": "Letterforms treated as artistic expression",
        "height": "h-72",
        "featured": False,
        "tags": ["typography", "lettering", "graphic"],
    },
    {
        "title": "Cinematic Short Film",
        "category": "video",
        "type": "video",
        "image": _unsplash("1489599063916-f4e4b71c2f87", 600),
        "video_url": "https://sample-videos.com/zip/10/mp4/SampleVideo_1280x720_1mb.mp4",
        "description": "A short film about solitude in the city",
        "height": "h-64",
        "featured": True,
        "tags": ["film", "cinematic", "narrative"],
    },
    {
        "title": "Documentary Excerpt",
        "category": "video",
        "type": "video",
        "image": _unsplash("1574717024653-61fd2cf4d44d", 500),
        "video_url": "https://sample-videos.com/zip/10/mp4/SampleVideo_1280x720_2mb.mp4",
        "description": "Documentary piece on contemporary art movements and their impact",
        "height": "h-56",
        "featured": True,
        "tags": ["documentary", "art", "culture"],
    },
]


def sample_items(count: int = SAMPLE_COUNT) -> List[Dict[str, Any]]:
    """
    Build the sample collection: the hand-written items above, then generated
    images and videos (roughly 60/40) until `count` items exist.
    """
    items = [dict(item) for item in FEATURED_ITEMS[:count]]
    remaining = count - len(items)
    image_count = remaining * 3 // 5

    for i in range(image_count):
        number = len(items) + 1
        items.append({
            "title": f"Gallery Item {number}",
            "category": ("photography", "art", "design")[i % 3],
            "type": "image",
            "image": f"https://picsum.photos/500/600?random={number}",
            "description": f"Professional artwork showcasing creative vision - Item {number}",
            "height": HEIGHTS[i % len(HEIGHTS)],
            "featured": i % 5 == 0,
            "tags": ["creative", "professional", "artistic"],
        })

    for i in range(remaining - image_count):
        number = len(items) + 1
        items.append({
            "title": f"Video Content {i + 1}",
            "category": "video",
            "type": "video",
            "image": f"https://picsum.photos/500/600?random={number + 100}",
            "video_url": SAMPLE_VIDEO,
            "description": f"Professional video content with a cinematic feel - Video {i + 1}",
            "height": HEIGHTS[i % len(HEIGHTS)],
            "featured": i % 7 == 0,
            "tags": ["video", "cinematic", "professional"],
        })

    return items


async def seed_gallery(storage: GalleryStorage, count: int = SAMPLE_COUNT) -> int:
    """
    Insert the sample collection into an empty gallery.

    Returns:
        int: Number of items inserted (0 when the gallery already has content)
    """
    existing = await storage.list_all()
    if existing:
        logger.info(f"Gallery already has {len(existing)} items, skipping sample seed")
        return 0

    items = sample_items(count)
    for fields in items:
        await storage.create(fields)

    logger.info(f"Seeded gallery with {len(items)} sample items")
    return len(items)
