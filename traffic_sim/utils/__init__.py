"""Analysis, persistence and plotting helpers for simulation output."""
