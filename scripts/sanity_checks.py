import os
import sys

import requests

BASE_URL = os.getenv("PAINEL_API_BASE_URL", "http://127.0.0.1:8000/api")


def check(endpoint: str, accepted: set) -> bool:
    url = f"{BASE_URL}{endpoint}"
    try:
        res = requests.get(url, timeout=10)
    except requests.RequestException as exc:
        print(f"FAIL {endpoint}: {exc}")
        return False
    if res.status_code != 200:
        print(f"FAIL {endpoint}: HTTP {res.status_code}")
        return False
    status = res.json().get("status")
    if status not in accepted:
        print(f"FAIL {endpoint}: status={status}")
        return False
    print(f"OK   {endpoint}: status={status}")
    return True


def main() -> int:
    ok = check("/health", {"ok"})
    ok = check("/doctor", {"OK", "WARN"}) and ok
    ok = check("/doctor/maps", {"OK"}) and ok
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
