"""Default files for prereq."""

FILENAME = "prereq.yml"


prereq_yml = """\
# Objects on the left depend on the objects on the right.
# Set reflexive to true to allow objects to depend on each other.
reflexive: false

requires:
  deploy: [build, test]
  test: build
  build: [fetch, configure]
"""
