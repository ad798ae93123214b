#!/usr/bin/env python3
"""Example client: create a storage pool and follow its task."""

import sys
import time
from typing import Any, Dict

import requests


class StorageAPIClient:
    """Client for the storage provisioning endpoints."""

    def __init__(self, base_url: str) -> None:
        """Initialize client.

        Args:
            base_url: Base URL of the API (e.g., http://localhost:8000)
        """
        self.base_url = base_url.rstrip("/")

    def _handle(self, response: requests.Response) -> Dict[str, Any]:
        body = response.json()
        if body.get("status") != "success":
            print(f"Error {response.status_code}: {body.get('code')} - {body.get('message')}", file=sys.stderr)
            sys.exit(1)
        return body["data"]

    def create_storage(self, cluster_id: str, request: Dict[str, Any]) -> str:
        """Start pool creation and return the task id."""
        try:
            response = requests.post(f"{self.base_url}/api/v1/cluster/{cluster_id}/storage", json=request)
        except requests.exceptions.RequestException as e:
            print(f"Request Error: {e}", file=sys.stderr)
            sys.exit(1)
        return self._handle(response)["task_id"]

    def get_task(self, task_id: str) -> Dict[str, Any]:
        """Fetch a task with its status log."""
        try:
            response = requests.get(f"{self.base_url}/api/v1/tasks/{task_id}")
        except requests.exceptions.RequestException as e:
            print(f"Request Error: {e}", file=sys.stderr)
            sys.exit(1)
        return self._handle(response)


def main() -> None:
    """Create a 100GB, 3-replica pool and print progress until the task ends."""
    if len(sys.argv) != 2:
        print(f"usage: {sys.argv[0]} CLUSTER_ID", file=sys.stderr)
        sys.exit(2)

    client = StorageAPIClient("http://localhost:8000")
    task_id = client.create_storage(
        sys.argv[1],
        {
            "name": "rbd-example",
            "size": "100GB",
            "replicas": 3,
            "quota_enabled": True,
            "quota_params": {"quota_max_objects": "100000"},
        },
    )
    print(f"Task: {task_id}")

    seen = 0
    while True:
        task = client.get_task(task_id)
        for entry in task["status_list"][seen:]:
            print(f"  {entry['timestamp']}  {entry['message']}")
        seen = len(task["status_list"])
        if task["done"]:
            break
        time.sleep(2)

    print("Failed" if task["failed"] else "Done")
    sys.exit(1 if task["failed"] else 0)


if __name__ == "__main__":
    main()
