"""pmhooks: lifecycle hook entry points that report and record session state."""
