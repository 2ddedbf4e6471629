"""Example usage of the yamldelta comparison engine."""

import json
from yamldelta import DiffEngine, EngineConfig, FilterOptions, Options, filter_differences

# Two revisions of a multi-document Kubernetes manifest
old_manifest = b"""
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
  namespace: prod
spec:
  replicas: 2
  template:
    spec:
      containers:
        - name: app
          image: nginx:1.25
          env:
            - name: LOG_LEVEL
              value: info
        - name: sidecar
          image: envoy:1.28
---
apiVersion: v1
kind: Service
metadata:
  name: web
  namespace: prod
spec:
  ports:
    - port: 80
"""

new_manifest = b"""
apiVersion: v1
kind: Service
metadata:
  name: web
  namespace: prod
spec:
  ports:
    - port: 8080
---
apiVersion: apps/v1
kind: Deployment
metadata:
  namespace: prod
  name: web
spec:
  replicas: 3
  template:
    spec:
      containers:
        - name: sidecar
          image: envoy:1.28
        - name: app
          image: nginx:1.27
          env:
            - name: LOG_LEVEL
              value: debug
            - name: FEATURE_FLAG
              value: "on"
"""


def print_differences(diffs):
    for diff in diffs:
        print(f"  - [{diff.kind.value}] {diff.path}")
        if diff.from_value is not None:
            print(f"    From: {diff.from_value!r}")
        if diff.to_value is not None:
            print(f"    To:   {diff.to_value!r}")


def main():
    print("=" * 60)
    print("yamldelta Comparison Engine - Example")
    print("=" * 60)

    engine = DiffEngine()
    options = Options(detect_kubernetes=True)
    diffs = engine.compare(old_manifest, new_manifest, options)

    print(f"\nDifferences ({len(diffs)}):")
    print_differences(diffs)

    print("\n" + "-" * 60)
    print("Full JSON Report:")
    print(json.dumps([d.to_dict() for d in diffs], indent=2))


def example_with_chroot():
    """Compare only the container list of the Deployment."""
    print("\n" + "=" * 60)
    print("Example with Chroot")
    print("=" * 60)

    old = old_manifest.split(b"---")[0]
    new = new_manifest.split(b"---")[1]
    options = Options(chroot="spec.template.spec.containers")

    diffs = DiffEngine().compare(old, new, options)
    print_differences(diffs)


def example_with_filters():
    """Drop environment changes from the report."""
    print("\n" + "=" * 60)
    print("Example with Filters")
    print("=" * 60)

    config = EngineConfig(max_payload_size_mb=1)
    engine = DiffEngine(config)
    diffs = engine.compare(old_manifest, new_manifest, Options(detect_kubernetes=True))

    filtered = filter_differences(diffs, FilterOptions(exclude_regexp=[r"\.env"]))
    print(f"\nKept {len(filtered)} of {len(diffs)} differences:")
    print_differences(filtered)


if __name__ == "__main__":
    main()
    example_with_chroot()
    example_with_filters()
