"""Medieval Shop — NPCs ask questions at the counter, answers are scored by an LLM."""
