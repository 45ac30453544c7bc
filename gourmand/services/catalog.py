"""Cuisine options and recommended dishes offered by the suggestion form."""

import random
from typing import List, Optional

KHMER_CUISINE = "ខ្មែរ"

CUISINE_OPTIONS = [
    KHMER_CUISINE,
    "ថៃ",
    "វៀតណាម",
    "ចិន",
    "ជប៉ុន",
    "កូរ៉េ",
    "ឥណ្ឌា",
    "អ៊ីតាលី",
    "ម៉ិកស៊ិក",
    "បារាំង",
]

RECOMMENDED_DISHES = [
    "សម្លរកកូរ",
    "អាម៉ុកត្រី",
    "គុយទាវ",
    "សម្លរម្ជូរគ្រឿងសាច់គោ",
    "ឆាក្តៅសាច់មាន់",
    "បាយសាច់ជ្រូក",
    "ឡុកឡាក់សាច់គោ",
    "ការីសាច់មាន់",
    "សម្លរម្ជូរយួន",
    "ឆាខ្ញីសាច់មាន់",
    "ត្រីចៀនជូរអែម",
    "ខសាច់ជ្រូក",
]


def recommended_dishes(count: int = 5, rng: Optional[random.Random] = None) -> List[str]:
    """Return a random sample of recommended dishes (no repeats)."""
    rng = rng or random.Random()
    count = max(0, min(count, len(RECOMMENDED_DISHES)))
    return rng.sample(RECOMMENDED_DISHES, count)
