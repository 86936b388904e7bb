"""SkyTrack Quickstart — which built-in satellites are above London right now?"""

from datetime import datetime, timezone

from skytrack import ObserverLocation, Registry, classify, compass_point, describe, fallback_catalog, populate

observer = ObserverLocation(51.5074, -0.1278, 35.0)

registry = Registry()
populate(registry, fallback_catalog())

now = datetime.now(timezone.utc)
registry.update_all(observer, now)

print(f"Tracking {len(registry)} objects, {registry.visible_count()} visible at {now:%H:%M:%S} UTC")
for sat in registry.get_visible_sorted():
    info = describe(sat)
    print(
        f"{info['name']:<16} az {info['azimuth']:>7} ({compass_point(sat.topocentric.bearing_deg):>3})"
        f"  el {info['elevation']:>6}  {info['distance']:>9}  {info['signal']:>4}"
    )

best = registry.best()
if best is None:
    print("No satellite above the horizon.")
else:
    print(f"Best: {best.identity} ({classify(best.signal_strength).value})")
