"""File-based JSON storage for player profiles and game configuration.

Data layout:
  data/
    config.json            Game settings (title tiers, questions, bonus NPCs, SMS texts)
    players/
      <visitor-id>.json    One PlayerProfile document per visitor

Visitor ids are opaque; safe_id() maps them to a file stem.

Config: get_config() returns defaults merged with stored values.
update_config() applies partial updates: title_tiers, visit_tiers and
scalars replaced wholesale, default_questions and browser_bonus merged
key-by-key.
"""

# Re-export all public symbols so `from medieval_shop import storage` keeps working.

from .core import (  # noqa: F401
    data_dir,
    init_storage,
    players_dir,
    safe_id,
)

from .config import (  # noqa: F401
    get_config,
    update_config,
)

from .players import (  # noqa: F401
    find_profile_by_phone,
    get_or_create_profile,
    get_profile,
    record_answer,
    register_phone,
    save_profile,
    title_tiers,
)
