"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of TokenLedger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. test_conservation.py - Total supply equals the sum of balances
2. test_cap.py - Total supply never exceeds the cap
3. test_allowances.py - Allowances are non-negative and set absolutely
4. test_atomicity.py - Rejected operations change nothing
5. test_determinism.py - Replay and clone reproduce state exactly

These tests use hypothesis for property-based testing.
"""
