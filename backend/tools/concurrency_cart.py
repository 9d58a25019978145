import argparse
import concurrent.futures
import os

import requests

BASE = os.environ.get("STOREFRONT_BASE", "http://127.0.0.1:8000")


def signin(email):
    r = requests.post(
        f"{BASE}/api/auth/signin",
        json={"email": email, "password": "concurrency"},
        timeout=10,
    )
    r.raise_for_status()
    return r.json()["access_token"]


def first_product_id():
    r = requests.get(f"{BASE}/api/products", params={"size": 1}, timeout=10)
    r.raise_for_status()
    items = r.json()["items"]
    if not items:
        raise SystemExit("No products; seed the catalogue first (scripts/seed_products.py)")
    return items[0]["id"]


def add_task(i, token, product_id, qty):
    headers = {"Authorization": f"Bearer {token}"}
    try:
        r = requests.post(
            f"{BASE}/api/cart",
            json={"product_id": product_id, "quantity": qty},
            headers=headers,
            timeout=20,
        )
        return (i, r.status_code, r.json().get("outcome") if r.ok else r.text)
    except requests.RequestException as e:
        return (i, "ERR", str(e))


def run_add_concurrent(workers, email, qty):
    token = signin(email)
    product_id = first_product_id()
    headers = {"Authorization": f"Bearer {token}"}
    before = requests.get(f"{BASE}/api/cart", headers=headers, timeout=10).json()
    start_qty = sum(it["quantity"] for it in before["items"] if it["product_id"] == product_id)

    print(f"Running add test: workers={workers}, product={product_id}, qty={qty}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(add_task, i, token, product_id, qty) for i in range(workers)]
        results = [f.result() for f in futures]
    for r in results:
        print(r)

    after = requests.get(f"{BASE}/api/cart", headers=headers, timeout=10).json()
    lines = [it for it in after["items"] if it["product_id"] == product_id]
    ok = sum(1 for r in results if r[1] == 200)
    expected = start_qty + ok * qty
    print("Lines for product:", len(lines), "(expect 1)")
    print("Quantity:", lines[0]["quantity"] if lines else 0, f"(expect {expected})")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Fire concurrent add-to-cart requests at one cart line.")
    parser.add_argument("--workers", type=int, default=8)
    parser.add_argument("--email", default="concurrency@example.com")
    parser.add_argument("--qty", type=int, default=1)
    args = parser.parse_args()
    run_add_concurrent(args.workers, args.email, args.qty)
