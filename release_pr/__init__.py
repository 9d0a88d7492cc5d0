"""release-pr: keep a release pull request in sync and release when it is merged."""
