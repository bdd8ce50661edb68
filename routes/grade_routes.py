from flask import Blueprint, jsonify, g

from routes import request_payload
from utils import admin_required
from utils import records
from utils.validation import grade_form, subject_form

grade_bp = Blueprint('grades', __name__, url_prefix='/grades')
subject_bp = Blueprint('subjects', __name__, url_prefix='/subjects')


@grade_bp.route('', methods=['GET'])
@admin_required
def view_grades():
    grades = records.list_grades(g.access)
    return jsonify({'grades': [grade.to_dict(with_student=True) for grade in grades]})


@grade_bp.route('', methods=['POST'])
@admin_required
def add_grade():
    grade = records.record_grade(g.access, grade_form(request_payload()))
    return jsonify({'grade': grade.to_dict()}), 201


@subject_bp.route('', methods=['GET'])
@admin_required
def view_subjects():
    return jsonify({'subjects': [s.to_dict() for s in records.list_subjects(g.access)]})


@subject_bp.route('', methods=['POST'])
@admin_required
def add_subject():
    subject = records.create_subject(g.access, subject_form(request_payload()))
    return jsonify({'subject': subject.to_dict()}), 201
