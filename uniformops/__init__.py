"""Order intake and free-text import review for a school-uniform vendor."""
