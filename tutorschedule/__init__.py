"""
TutorSchedule: lesson booking, conflict detection and week timetables for a tutoring center.
"""
