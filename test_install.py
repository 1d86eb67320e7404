"""
Quick test script to verify AgentSmith installation and basic functionality.
"""

import agentsmith as ags
import numpy as np

print("=" * 80)
print("AgentSmith Installation Test")
print("=" * 80)

# Test 1: Construction
print("\n1. Testing construction...")
a = ags.Matrix.from_array([[1, 2], [3, 4]])
b = ags.Matrix.from_array([[5, 6], [7, 8]])
print(f"   ✓ Built {a.shape.rows}x{a.shape.cols} matrices")

# Test 2: Matrix product
print("\n2. Testing matrix product...")
product = ags.multiply(a, b)
assert product.to_list() == [[19.0, 22.0], [43.0, 50.0]]
print(f"   ✓ Product: {product.to_list()}")

# Test 3: Zero-copy transpose
print("\n3. Testing transpose...")
at = a.t()
assert at.data is a.data
assert at.get(0, 1) == 3.0
print(f"   ✓ Transpose shares buffer, layout {at.layout.name}")

# Test 4: Broadcasting
print("\n4. Testing broadcast arithmetic...")
m = ags.Matrix(3, 4)
m.add(ags.Matrix.from_array([[1], [2], [3]]))
assert np.allclose(m.to_numpy()[:, 0], [1, 2, 3])
print(f"   ✓ Column vector broadcast: {m.to_numpy()[:, 0].tolist()}")

print("\n" + "=" * 80)
print("✓ All tests passed! AgentSmith is working correctly.")
print("=" * 80)
print("\nNext steps:")
print("  - Run the test suite: pytest tests/")
print("  - Read the README: cat README.md")
print("=" * 80)
