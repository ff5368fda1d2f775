"""
Batch request simulation against the running recognizer API.
Sends N synthetic images of random size and tint to /predict and reports
the label distribution, confidence, and latency.

Usage:
    python monitoring/simulate_requests.py --n 50 --url http://localhost:8000
"""

import argparse
import io
import json
import random
import time
from collections import Counter
from datetime import datetime, timezone

import numpy as np
import requests
from PIL import Image

# Image sizes a phone gallery typically hands over
SIZES = [(224, 224), (640, 480), (480, 640), (1024, 768), (97, 311)]


def make_dummy_image(size: tuple, rng: np.random.Generator) -> bytes:
    """Generate a noisy, tinted JPEG of the given (width, height) in memory."""
    width, height = size
    tint = rng.integers(0, 256, size=3)
    noise = rng.integers(-40, 41, size=(height, width, 3))
    arr = np.clip(tint + noise, 0, 255).astype(np.uint8)
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="JPEG")
    return buf.getvalue()


def run_simulation(base_url: str, n: int, seed: int = 0, report_path: str = None):
    predict_url = f"{base_url}/predict"
    health_url = f"{base_url}/health"

    resp = requests.get(health_url, timeout=5)
    resp.raise_for_status()
    print(f"[Health] {resp.json()}\n")

    rng = np.random.default_rng(seed)
    random.seed(seed)
    results = []  # (label, confidence, latency)
    errors = 0

    for i in range(n):
        size = random.choice(SIZES)
        img_bytes = make_dummy_image(size, rng)

        start = time.perf_counter()
        try:
            r = requests.post(
                predict_url,
                files={"file": ("test.jpg", img_bytes, "image/jpeg")},
                timeout=10,
            )
        except requests.RequestException as e:
            errors += 1
            print(f"  [{i+1:02d}/{n}] EXCEPTION: {e}")
            continue
        latency = time.perf_counter() - start

        if r.status_code != 200:
            errors += 1
            print(f"  [{i+1:02d}/{n}] ERROR: HTTP {r.status_code}")
            continue

        data = r.json()
        results.append((data["label"], data["confidence"], latency))
        print(
            f"  [{i+1:02d}/{n}] size={size[0]}x{size[1]:<5} {data['message']:<28} "
            f"latency={latency*1000:.1f}ms"
        )

    print("\n" + "=" * 55)
    print("  Recognizer Load Report")
    print(f"  Generated: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}")
    print("=" * 55)

    if not results:
        print("  No successful predictions recorded.")
        return None

    total = len(results)
    labels = Counter(label for label, _, _ in results)
    latencies = sorted(l for _, _, l in results)
    avg_conf = sum(c for _, c, _ in results) / total
    avg_lat = sum(latencies) / total
    p95_lat = latencies[min(int(0.95 * total), total - 1)]

    print(f"  Total requests     : {n}")
    print(f"  Successful         : {total}")
    print(f"  Errors             : {errors}")
    for label in ("cat", "dog", "neither"):
        print(f"  {label:<19}: {labels.get(label, 0)}")
    print(f"  Avg confidence     : {avg_conf:.1f}%")
    print(f"  Avg latency        : {avg_lat*1000:.1f} ms")
    print(f"  P95 latency        : {p95_lat*1000:.1f} ms")
    print("=" * 55)

    report = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "total_requests": n,
        "successful": total,
        "errors": errors,
        "labels": dict(labels),
        "avg_confidence": round(avg_conf, 2),
        "avg_latency_ms": round(avg_lat * 1000, 2),
        "p95_latency_ms": round(p95_lat * 1000, 2),
    }
    if report_path:
        with open(report_path, "w") as f:
            json.dump(report, f, indent=2)
        print(f"\n  Report saved → {report_path}")
    return report


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate batch inference requests")
    parser.add_argument("--n", type=int, default=50, help="Number of requests")
    parser.add_argument("--url", type=str, default="http://localhost:8000")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--report", type=str, default="monitoring/load_report.json")
    args = parser.parse_args()
    run_simulation(args.url, args.n, seed=args.seed, report_path=args.report)
