import sqlite3
import sys

DB = sys.argv[1] if len(sys.argv) > 1 else "dev.db"
EMAIL = sys.argv[2] if len(sys.argv) > 2 else None

conn = sqlite3.connect(DB)
cur = conn.cursor()

print("=== Carts ===")
if EMAIL:
    cur.execute(
        "SELECT c.id, u.email, c.created_at FROM carts c JOIN users u ON u.id = c.user_id WHERE u.email=?",
        (EMAIL,),
    )
else:
    cur.execute(
        "SELECT c.id, u.email, c.created_at FROM carts c JOIN users u ON u.id = c.user_id ORDER BY c.created_at DESC LIMIT 20"
    )
carts = cur.fetchall()
for r in carts:
    print({"cart_id": r[0], "email": r[1], "created_at": r[2]})

print("\n=== Cart lines ===")
for cart_id, _, _ in carts:
    cur.execute(
        "SELECT l.product_id, p.name, l.quantity, p.price_cents FROM cart_lines l "
        "JOIN products p ON p.id = l.product_id WHERE l.cart_id=? ORDER BY p.name",
        (cart_id,),
    )
    rows = cur.fetchall()
    total = sum(r[2] * r[3] for r in rows)
    print(f"cart {cart_id}: {len(rows)} lines, total {total / 100:.2f}")
    for r in rows:
        print("   ", r)

print("\n=== Duplicate lines (should be empty) ===")
cur.execute(
    "SELECT cart_id, product_id, COUNT(*) FROM cart_lines GROUP BY cart_id, product_id HAVING COUNT(*) > 1"
)
for r in cur.fetchall():
    print(r)

conn.close()
