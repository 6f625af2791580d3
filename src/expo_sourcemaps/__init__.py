"""Stage Expo update bundles and sourcemaps by update id and upload them to Sentry."""
