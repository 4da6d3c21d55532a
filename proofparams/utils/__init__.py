"""Small hashing helpers shared by the identifier deriver."""
