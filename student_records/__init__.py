"""Student Records API - student academic records with derived grades."""
