"""Static gamification tables: division heuristics, XP values, rank thresholds, theme catalog."""

# Problem letters worth assigning per contest division (by "Div. N" in the contest name).
DIVISION_PROBLEM_INDICES: dict[int, list[str]] = {
    2: ["C", "C1", "D"],
    3: ["D", "E"],
    4: ["E", "F"],
}

# XP for a solved problem, keyed "{division}{index}" e.g. "Div. 2C". Unlisted keys are worth 0.
XP_TABLE: dict[str, int] = {
    "Div. 1D": 50,
    "Div. 2C": 20,
    "Div. 2D": 15,
    "Div. 3E": 12,
    "Div. 3F": 20,
    "Div. 4G": 25,
}

# Self-reported help received on a solve -> percent of XP deducted.
ASSISTANCE_DEDUCTIONS: dict[str, int] = {
    "none": 0,
    "hint": 40,
    "editorial": 60,
}

# (min experience, title), ascending. Title = last row whose threshold <= experience.
RANK_THRESHOLDS: list[tuple[int, str]] = [
    (0, "Newbie"),
    (250, "Pupil"),
    (500, "Expert"),
    (1000, "Grandmaster"),
]

QUEST_MIN_REWARD = 10
QUEST_DEFAULT_REWARD = 50

DEFAULT_THEME_ID = "default"
# Switching back to an owned paid theme costs this share of its price (floored).
THEME_SWITCH_FEE_PERCENT = 10

THEMES: list[dict] = [
    {
        "id": DEFAULT_THEME_ID,
        "name": "Modern Mint",
        "description": "Clean and modern UI with a refreshing mint palette",
        "cost": 0,
        "background_color": "#f8f9fa",
        "text_color": "#2d3748",
        "accent_color": "#38b2ac",
        "primary_color": "#38b2ac",
        "font_family": "'Inter', 'Segoe UI', sans-serif",
    },
    {
        "id": "heroes_journey",
        "name": "Hero's Journey",
        "description": "A medieval adventure theme with parchment textures and gold accents",
        "cost": 100,
        "background_color": "#f8f0e3",
        "text_color": "#3a2921",
        "accent_color": "#c19a49",
        "primary_color": "#8a5a44",
        "font_family": "'Cinzel', 'Times New Roman', serif",
    },
    {
        "id": "pixel_kingdom",
        "name": "Pixel Kingdom",
        "description": "A retro 8-bit theme with pixelated backgrounds and arcade vibes",
        "cost": 150,
        "background_color": "#2a2a57",
        "text_color": "#ffffff",
        "accent_color": "#ff6b6b",
        "primary_color": "#3dd6f5",
        "font_family": "'Press Start 2P', 'Courier New', monospace",
    },
    {
        "id": "sci_fi_command",
        "name": "Sci-Fi Command",
        "description": "High-tech UI with glowing neon panels and futuristic layout",
        "cost": 200,
        "background_color": "#06101f",
        "text_color": "#7fdbff",
        "accent_color": "#ff0055",
        "primary_color": "#7fdbff",
        "font_family": "'Orbitron', 'Arial', sans-serif",
    },
    {
        "id": "treasure_hunter",
        "name": "Treasure Hunter",
        "description": "Pirate-themed aesthetic with aged paper and weathered wood",
        "cost": 250,
        "background_color": "#382a1d",
        "text_color": "#e6bc6c",
        "accent_color": "#1a6a8b",
        "primary_color": "#e6bc6c",
        "font_family": "'Pirata One', 'Georgia', serif",
    },
    {
        "id": "dark_overlord",
        "name": "Dark Overlord",
        "description": "Mysterious villain-themed design with crimson and obsidian",
        "cost": 300,
        "background_color": "#0e0e0e",
        "text_color": "#c9c9c9",
        "accent_color": "#a30000",
        "primary_color": "#ff2222",
        "font_family": "'Crimson Text', 'Times New Roman', serif",
    },
]
