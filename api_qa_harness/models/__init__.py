"""Data models shared by clients, seeder and checks."""
