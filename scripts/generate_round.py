"""Generate a synthetic round snapshot for demos and manual testing.

Creates fake participants and candidate titles using faker with a fixed seed,
random top-list rankings and per-category selections (some deliberately
incomplete), and optionally revealed answer sets. The output is the JSON
shape accepted by RoundSnapshot.from_dict and the leaderboard API.

Usage:
    python scripts/generate_round.py
    python scripts/generate_round.py --users 40 --reveal -o round.json
"""

import argparse
import json
import random
from pathlib import Path

from faker import Faker

DEFAULT_OUTPUT = Path(__file__).parent.parent / "examples" / "round.json"

SEED = 20260201

# (category name, shortlist size); every category has five slots
CATEGORIES = [
    ("Best Director", 10),
    ("Best Actress", 16),
    ("Best Original Score", 20),
    ("Best Cinematography", 10),
    ("Best Visual Effects", 20),
]
CATEGORY_SLOTS = 5
TOP_LIST_SLOTS = 10
TOP_LIST_POOL = 40


def fake_titles(fake: Faker, count: int, used: set[str]) -> list[str]:
    """Generate ``count`` distinct movie-like titles."""
    titles = []
    while len(titles) < count:
        title = " ".join(fake.words(nb=random.randint(1, 3))).title()
        if title.lower() in used:
            continue
        used.add(title.lower())
        titles.append(title)
    return titles


def build_category(cat_id: str, name: str, titles: list[str], slots: int) -> dict:
    return {
        "id": cat_id,
        "name": name,
        "slots": slots,
        "pool": [{"id": f"{cat_id}-{i}", "name": t} for i, t in enumerate(titles, 1)],
        "answer_set": None,
    }


def generate_round(users: int, reveal: bool, seed: int) -> dict:
    fake = Faker(["en_US", "en_GB", "cs_CZ"])
    Faker.seed(seed)
    random.seed(seed)

    used: set[str] = set()
    top_list = build_category(
        "top", "Top 10", fake_titles(fake, TOP_LIST_POOL, used), TOP_LIST_SLOTS
    )
    categories = [
        build_category(f"c{i}", name, fake_titles(fake, size, used), CATEGORY_SLOTS)
        for i, (name, size) in enumerate(CATEGORIES, 1)
    ]

    participants = []
    selections = []
    for i in range(1, users + 1):
        user_id = f"u{i}"
        participants.append({
            "id": user_id,
            "name": fake.name(),
            "finalized": random.random() < 0.85,
        })

        ranked = random.sample(top_list["pool"], TOP_LIST_SLOTS)
        for rank, candidate in enumerate(ranked, 1):
            selections.append({
                "user_id": user_id,
                "candidate_id": candidate["id"],
                "rank": rank,
                "category_id": None,
            })

        for category in categories:
            # Roughly one in eight selections is left incomplete
            count = CATEGORY_SLOTS if random.random() < 0.875 else random.randint(0, CATEGORY_SLOTS - 1)
            for candidate in random.sample(category["pool"], count):
                selections.append({
                    "user_id": user_id,
                    "candidate_id": candidate["id"],
                    "rank": None,
                    "category_id": category["id"],
                })

    if reveal:
        top_list["answer_set"] = [c["id"] for c in random.sample(top_list["pool"], TOP_LIST_SLOTS)]
        for category in categories:
            category["answer_set"] = [
                c["id"] for c in random.sample(category["pool"], CATEGORY_SLOTS)
            ]

    return {
        "round_id": str(seed),
        "participants": participants,
        "top_list": top_list,
        "categories": categories,
        "selections": selections,
    }


def main():
    parser = argparse.ArgumentParser(
        description="Generate a synthetic round snapshot")
    parser.add_argument("-n", "--users", type=int, default=25,
                        help="Number of participants (default: 25)")
    parser.add_argument("--reveal", action="store_true",
                        help="Include revealed answer sets")
    parser.add_argument("--seed", type=int, default=SEED,
                        help=f"Random seed (default: {SEED})")
    parser.add_argument("-o", "--output", default=str(DEFAULT_OUTPUT),
                        help=f"Output path (default: {DEFAULT_OUTPUT})")
    args = parser.parse_args()

    data = generate_round(args.users, args.reveal, args.seed)
    print(f"Generated {len(data['participants'])} participants, "
          f"{len(data['selections'])} selections")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Written to {output_path}")


if __name__ == "__main__":
    main()
