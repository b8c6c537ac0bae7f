"""Locust load script for the catalog service.
Usage:
  COOLSTREAM_KEY="<access key>" locust -f perf/locustfile.py --host http://localhost:8000
"""
import os
import random
from locust import HttpUser, task, between

ACCESS_KEY = os.getenv("COOLSTREAM_KEY", "loadtest")
QUERIES = ["matrix", "alien", "office", "dune", "breaking"]


class CatalogUser(HttpUser):
    wait_time = between(0.2, 1.0)

    def on_start(self):
        self.client.headers["X-Access-Key"] = ACCESS_KEY

    @task(3)
    def trending(self):
        self.client.get("/api/movies/trending?time_window=day")
        self.client.get("/api/tv/trending?time_window=day")

    @task(2)
    def search(self):
        query = random.choice(QUERIES)
        self.client.get(f"/api/movies/search?q={query}", name="/api/movies/search")
        self.client.get(f"/api/tv/search?q={query}", name="/api/tv/search")

    @task(2)
    def library_round_trip(self):
        content_id = random.randint(1, 5000)
        self.client.post("/api/library/watchlist", json={
            "id": content_id,
            "type": "movie",
            "title": f"Load test {content_id}",
            "posterPath": None,
            "voteAverage": 7.0,
        })
        self.client.put("/api/library/continue-watching", json={
            "contentId": content_id,
            "contentType": "movie",
            "title": f"Load test {content_id}",
            "progress": random.uniform(0, 100),
            "durationSeconds": 5400,
            "provider": "vidsrc",
        })
        self.client.get("/api/library/continue-watching")
        self.client.delete(f"/api/library/watchlist/movie/{content_id}", name="/api/library/watchlist/[type]/[id]")
